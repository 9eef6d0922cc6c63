"""Support for the note file dialects.

:class:`denotes.accessors.base.Accessor` is the API that must be implemented to add support for a dialect.
The other modules in this package provide implementations for specific formats.
"""
