"""Opens note files in an external program and waits for it to exit."""

import logging
import os
import shlex
import subprocess
import sys
from typing import List, Optional

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Raised when no editor can be determined, or the editor fails."""


def default_opener(platform: str = None) -> Optional[List[str]]:
    """Returns the command prefix for the platform's default program for a file, or None if unknown."""
    platform = platform or sys.platform
    if platform == 'darwin':
        return ['open']
    if platform.startswith('linux') or platform.startswith('freebsd'):
        return ['xdg-open']
    if platform in ('win32', 'cygwin'):
        return ['rundll32', 'url.dll,FileProtocolHandler']
    return None


def resolve_editor_command(path: str, editor: str = None, platform: str = None) -> List[str]:
    """Returns the command line to open the given file.

    The first available of these is used: the editor argument, the ``VISUAL`` environment variable, the ``EDITOR``
    environment variable, or the platform's default opener (``open``, ``xdg-open``, or ``rundll32``).
    Editor strings may include options, e.g. ``"code --wait"``.

    Raises :exc:`EditorError` if nothing applies.
    """
    editor = editor or os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if editor:
        return shlex.split(editor) + [path]
    opener = default_opener(platform)
    if not opener:
        raise EditorError('No editor configured; set $EDITOR or `editor` in your config file')
    return opener + [path]


def open_in_editor(path: str, editor: str = None) -> None:
    """Opens the file and blocks until the program exits.

    Raises :exc:`EditorError` if the program cannot be started or exits with an error status.
    """
    cmd = resolve_editor_command(path, editor)
    logger.debug('Running %s', cmd)
    try:
        subprocess.run(cmd, check=True)
    except (OSError, subprocess.SubprocessError) as e:
        raise EditorError(f'Failure editing file {path}: {e}')
