from typing import List, Tuple

from denotes.accessors.base import Accessor, expand_newline_escapes
from denotes.models import Note, unique_tags

DIRECTIVE_PREFIX = '#+'
TITLE_DIRECTIVE = '#+TITLE:'
DATE_DIRECTIVE = '#+DATE:'
MODIFIED_DIRECTIVE = '#+MODIFIED:'
TAGS_DIRECTIVE = '#+TAGS:'
FILETAGS_DIRECTIVE = '#+FILETAGS:'

DATE_FORMAT = '%Y-%m-%d'


def _split_tags(value: str) -> List[str]:
    """Tokenizes both ``:a:b:`` blocks and ``a b`` directive values."""
    return value.replace(':', ' ').split()


def _heading_tags(line: str) -> List[str]:
    """Returns the tags from a trailing ``:a:b:`` block on a heading line like ``* Heading :a:b:``."""
    if not line.startswith('*'):
        return []
    last_space = line.rfind(' ')
    if last_space == -1 or last_space == len(line) - 1:
        return []
    block = line[last_space + 1:].strip()
    if block.startswith(':') and block.endswith(':'):
        return _split_tags(block)
    return []


def parse(text: str) -> Tuple[str, str, List[str]]:
    """Returns the title, content, and tags from a file in the outline dialect.

    Directives are only recognized before the content starts, which is at the first line that is neither blank
    nor begins with ``#+``. Tags from ``#+TAGS:``, ``#+FILETAGS:``, and heading lines anywhere in the file are
    combined, with duplicates removed.
    """
    title = ''
    tags = []
    content_start = None
    lines = text.split('\n')
    for i, raw in enumerate(lines):
        line = raw.strip()
        if content_start is None:
            upper = line.upper()
            if upper.startswith(TITLE_DIRECTIVE):
                value = line[len(TITLE_DIRECTIVE):].strip()
                if value:
                    title = value
                continue
            if upper.startswith(FILETAGS_DIRECTIVE):
                tags.extend(_split_tags(line[len(FILETAGS_DIRECTIVE):]))
                continue
            if upper.startswith(TAGS_DIRECTIVE):
                tags.extend(_split_tags(line[len(TAGS_DIRECTIVE):]))
                continue
            if not line or line.startswith(DIRECTIVE_PREFIX):
                continue
            content_start = i
        tags.extend(_heading_tags(line))
    content = ''
    if content_start is not None:
        content = '\n'.join(lines[content_start:]).strip()
    return title, content, unique_tags(tags)


def format_note(note: Note) -> str:
    """Returns the contents of an outline dialect file for the note."""
    lines = [f'{TITLE_DIRECTIVE} {note.title}',
             f'{DATE_DIRECTIVE} {note.created.strftime(DATE_FORMAT)}',
             f'{MODIFIED_DIRECTIVE} {note.modified.strftime(DATE_FORMAT)}']
    if note.tags:
        lines.append(f'{TAGS_DIRECTIVE} {" ".join(note.tags)}')
    lines.append('')
    return '\n'.join(lines) + '\n' + expand_newline_escapes(note.content)


class OutlineAccessor(Accessor):
    """Responsible for parsing and writing ``.org`` notes.

    Current support:

    * The title comes from the last non-empty ``#+TITLE:`` directive.
    * Tags can be stored in ``#+TAGS:`` and ``#+FILETAGS:`` directives (either ``a b`` or ``:a:b:`` style), and
      at the end of headings, like ``* Heading :a:b:``.
        * When writing, all tags go into a single ``#+TAGS:`` directive.
    * ``#+DATE:`` and ``#+MODIFIED:`` are written but ignored when parsing.

    Here's an example file:

    .. code-block:: text

       #+TITLE: Weekly review
       #+FILETAGS: :work:urgent:

       * Review :work:planning:
       Everything from the heading on is content.
    """
    def _parse(self, text: str) -> Tuple[str, str, List[str]]:
        return parse(text)

    def _format(self, note: Note) -> str:
        return format_note(note)
