"""Provides the main entry point for using the library, :class:`Denotes`"""

from __future__ import annotations
import os.path
from typing import Optional

from denotes.conf import DenotesConf
from denotes.editor import open_in_editor
from denotes.models import Note
from denotes.repos.direct import DirectRepo


class Denotes:
    """Main entry point for working programmatically with your collection of notes.

    Generally, you should get an instance using the :meth:`Denotes.for_user` method. Call :meth:`close` when you're
    done with it, or else use it as a context manager.

    .. attribute:: conf
       :type: denotes.conf.DenotesConf

       Typically loaded from ``~/.denotesrc.yaml``

    .. attribute:: repo
       :type: denotes.repos.base.Repo

       Provides the note operations: create, get, update, delete, and the various searches.

    Here's an example of how to use this class. This would print the title of every note tagged "journal".

    .. code-block:: python

       from denotes.api import Denotes
       with Denotes.for_user() as dn:
           for note in dn.repo.search_by_tag('journal'):
               print(note.title)
    """

    @staticmethod
    def for_user() -> Denotes:
        """Creates an instance using the user's ``~/.denotesrc.yaml`` file.

        Raises :exc:`denotes.conf.ConfError` if it does not exist or is invalid.
        """
        return DenotesConf.for_user().instantiate()

    def __init__(self, conf: DenotesConf, conf_path: Optional[str] = None):
        self.conf = conf
        self.conf_path = conf_path
        self.repo = DirectRepo(conf)

    def edit(self, note_id: str) -> Note:
        """Opens the note in the external editor, waits for the editor to exit, and returns the reloaded note."""
        path = self.repo.get(note_id).path
        open_in_editor(path, self.conf.editor)
        return self.repo.get(os.path.splitext(os.path.basename(path))[0])

    def _replace_conf(self, conf: DenotesConf) -> None:
        conf.save(self.conf_path)
        self.conf = conf
        self.repo = DirectRepo(conf)

    def add_dir(self, path: str) -> None:
        """Adds a notes directory to the configuration and saves it. The directory is created if needed."""
        self._replace_conf(self.conf.with_dir_added(path))

    def remove_dir(self, path: str) -> None:
        """Removes a notes directory from the configuration and saves it. No files are deleted."""
        self._replace_conf(self.conf.with_dir_removed(path))

    def close(self):
        """Closes the associated repo and releases any other resources."""
        self.repo.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.repo.close()
