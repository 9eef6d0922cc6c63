from typing import List, Tuple

from denotes.accessors.base import Accessor, expand_newline_escapes
from denotes.models import Note

TITLE_LABEL = 'Title:'
CREATED_LABEL = 'Created:'
MODIFIED_LABEL = 'Modified:'
TAGS_LABEL = 'Tags:'

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def _split_tags(value: str) -> List[str]:
    # empty entries like the middle of "a,,b" are kept
    return [t.strip() for t in value.strip().split(',')]


def parse(text: str) -> Tuple[str, str, List[str]]:
    """Returns the title, content, and tags from a file in the plain dialect.

    Metadata lines are recognized only before the content starts. The first line that is neither blank nor
    starts with one of the labels begins the content, and every line after it is content, even if it looks
    like metadata.
    """
    title = ''
    tags = []
    content = ''
    lines = text.split('\n')
    for i, line in enumerate(lines):
        if line.startswith(TITLE_LABEL):
            title = line[len(TITLE_LABEL):].strip()
        elif line.startswith(TAGS_LABEL):
            tags = _split_tags(line[len(TAGS_LABEL):])
        elif line.startswith(CREATED_LABEL) or line.startswith(MODIFIED_LABEL):
            continue
        elif not line.strip():
            continue
        else:
            content = '\n'.join(lines[i:]).strip()
            break
    return title, content, tags


def format_note(note: Note) -> str:
    """Returns the contents of a plain dialect file for the note."""
    lines = [f'{TITLE_LABEL} {note.title}',
             f'{CREATED_LABEL} {note.created.strftime(TIMESTAMP_FORMAT)}',
             f'{MODIFIED_LABEL} {note.modified.strftime(TIMESTAMP_FORMAT)}']
    if note.tags:
        lines.append(f'{TAGS_LABEL} {", ".join(note.tags)}')
    lines.append('')
    return '\n'.join(lines) + '\n' + expand_newline_escapes(note.content)


class PlainAccessor(Accessor):
    """Responsible for parsing and writing plain text notes.

    Here's an example file:

    .. code-block:: text

       Title: Weekly planning
       Created: 2024-12-01 14:30:22
       Modified: 2024-12-02 09:00:00
       Tags: work, planning

       Everything from here on is content.

    The ``Created`` and ``Modified`` lines are written for the reader's benefit but ignored when parsing.
    """
    def _parse(self, text: str) -> Tuple[str, str, List[str]]:
        return parse(text)

    def _format(self, note: Note) -> str:
        return format_note(note)


class MarkupAccessor(PlainAccessor):
    """Responsible for ``.md`` notes.

    Markdown semantics are not modeled; these files use the same metadata lines as :class:`PlainAccessor`.
    """
