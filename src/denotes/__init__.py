"""Helps manage notes stored as plain files in one or more directories.

If you installed via ``pip``, run ``denotes -h`` to get help.
Or, run ``python3 -m denotes -h``.

To use the Python API, look at :class:`denotes.api.Denotes`
"""
