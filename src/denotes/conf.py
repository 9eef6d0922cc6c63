from __future__ import annotations
from dataclasses import dataclass, field, replace
import os
import os.path
from typing import List, Optional

import yaml


class ConfError(Exception):
    """Raised when the configuration file is missing or invalid, or a requested change to it is not allowed."""


def default_notes_dir() -> str:
    return os.path.join(os.path.expanduser('~'), 'notes')


def expand_dir(path: str) -> str:
    return os.path.abspath(os.path.expanduser(path))


@dataclass
class DenotesConf:
    notes_dirs: List[str] = field(default_factory=lambda: [default_notes_dir()])
    """The directories that are searched when listing or searching notes, in order.

    The first one is the primary directory: new notes are created there. Subdirectories are not searched.
    Must not be empty.
    """

    editor: Optional[str] = None
    """Command used to open notes for editing.

    If not set, the ``VISUAL`` or ``EDITOR`` environment variable is used, and if neither is set, the
    platform's default program for the file type.
    """

    @classmethod
    def user_config_path(cls) -> str:
        """Returns the path to the user's config file, ``~/.denotesrc.yaml``"""
        return os.path.expanduser(os.path.join('~', '.denotesrc.yaml'))

    @classmethod
    def for_user(cls) -> DenotesConf:
        """Loads the user's config file.

        Raises :exc:`ConfError` if it does not exist.
        """
        path = cls.user_config_path()
        if not os.path.exists(path):
            raise ConfError(f'You need to create the config file (try `denotes init`): {path}')
        return cls.load(path)

    @classmethod
    def load(cls, path: str) -> DenotesConf:
        with open(path, 'r', encoding='utf-8') as file:
            try:
                data = yaml.safe_load(file)
            except yaml.YAMLError as e:
                raise ConfError(f'Could not parse config file {path}: {e}')
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfError(f'Config file must contain a mapping: {path}')
        dirs = data.get('notes_dirs') or [default_notes_dir()]
        if isinstance(dirs, str):
            dirs = [dirs]
        editor = data.get('editor')
        if editor is not None and not isinstance(editor, str):
            raise ConfError(f'`editor` must be a command string in config file {path}')
        return cls(notes_dirs=[str(d) for d in dirs], editor=editor).standardize()

    def save(self, path: str = None) -> None:
        """Writes this configuration to the given path, or the user's config file by default."""
        path = path or self.user_config_path()
        data = {'notes_dirs': list(self.notes_dirs)}
        if self.editor:
            data['editor'] = self.editor
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as file:
            yaml.safe_dump(data, file, default_flow_style=False)

    @property
    def primary_dir(self) -> str:
        return self.notes_dirs[0]

    def standardize(self) -> DenotesConf:
        """Returns a copy with ``~`` expanded and every directory made absolute, without duplicates."""
        dirs = []
        for d in self.notes_dirs:
            d = expand_dir(d)
            if d not in dirs:
                dirs.append(d)
        return replace(self, notes_dirs=dirs)

    def with_dir_added(self, path: str) -> DenotesConf:
        """Returns a copy with the directory appended to :attr:`notes_dirs`, creating it if necessary.

        Raises :exc:`ConfError` if it is already configured.
        """
        path = expand_dir(path)
        if path in self.notes_dirs:
            raise ConfError(f'Directory {path} is already in the configuration')
        os.makedirs(path, exist_ok=True)
        return replace(self, notes_dirs=self.notes_dirs + [path])

    def with_dir_removed(self, path: str) -> DenotesConf:
        """Returns a copy without the directory. The directory itself is not touched.

        Raises :exc:`ConfError` if it is not configured, or if it is the only directory.
        """
        path = expand_dir(path)
        if path not in self.notes_dirs:
            raise ConfError(f'Directory {path} not found in configuration')
        remaining = [d for d in self.notes_dirs if not d == path]
        if not remaining:
            raise ConfError('Cannot remove all directories - at least one must remain')
        return replace(self, notes_dirs=remaining)

    def instantiate(self):
        from denotes.api import Denotes
        return Denotes(self.standardize())
