"""Functions for deriving note ids and filenames.

An id looks like ``20241201_143022_meeting_notes_``: the creation time in a fixed-width form, so that sorting
filenames also sorts by creation time, followed by a filesystem-safe version of the title.
"""

from datetime import datetime
import os.path
import re
from typing import Optional

import shortuuid

from denotes.models import NoteFormat

ID_TIME_FORMAT = '%Y%m%d_%H%M%S'
ID_TIME_LENGTH = 15
MAX_TITLE_LENGTH = 50

UNSAFE_CHARS_RE = re.compile(r'[^a-z0-9_]')


def sanitize_title(title: str) -> str:
    """Returns a version of the title that is safe to use in a filename on common filesystems.

    The following adjustments are made:

    * Characters are converted to lowercase
    * Only the letters a-z, digits 0-9 and underscores are kept; every other character (including space, ``/``,
      ``\\``, ``:``, ``*``, ``?``, ``"``, ``<``, ``>``, and ``|``) is replaced with an underscore
    * The result is truncated to 50 characters, which may cut a word in half

    For example, "Meeting Notes!" becomes ``meeting_notes_``.
    """
    return UNSAFE_CHARS_RE.sub('_', title.lower())[:MAX_TITLE_LENGTH]


def make_id(title: str, created: datetime) -> str:
    """Returns the id for a note with the given title created at the given time."""
    return f'{created.strftime(ID_TIME_FORMAT)}_{sanitize_title(title)}'


def created_from_id(note_id: str) -> Optional[datetime]:
    """Returns the creation time embedded at the start of the id, or None if there isn't a valid one."""
    if len(note_id) < ID_TIME_LENGTH:
        return None
    try:
        return datetime.strptime(note_id[:ID_TIME_LENGTH], ID_TIME_FORMAT)
    except ValueError:
        return None


def _id_taken(directory: str, note_id: str) -> bool:
    return any(os.path.exists(os.path.join(directory, f'{note_id}.{fmt.extension}')) for fmt in NoteFormat)


def find_available_id(directory: str, note_id: str) -> str:
    """Returns an id that no existing note file in the directory uses, whatever its format.

    If no ``{note_id}.txt``, ``.org``, or ``.md`` file exists yet, note_id is returned unchanged. Otherwise a short
    random suffix is appended, so that two notes with the same title created within the same second keep
    distinct ids.
    """
    candidate = note_id
    while _id_taken(directory, candidate):
        candidate = f'{note_id}_{shortuuid.uuid()[:8].lower()}'
    return candidate
