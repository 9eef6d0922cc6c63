"""Handles interaction with a collection of notes.

:class:`denotes.repos.base.Repo` defines an API, and :class:`denotes.repos.direct.DirectRepo` implements it
by scanning the configured directories on every read.
"""
