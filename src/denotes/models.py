"""Defines classes for representing notes and queries over them.

The most important classes are :class:`Note`, :class:`NoteFormat`, and :class:`NoteQuery`
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
import os.path
from typing import List, Optional, Union, Iterable, Iterator


class NoteFormat(Enum):
    """The closed set of formats a note can be stored in.

    The value of each member is the file extension used for it.
    """
    PLAIN = 'txt'
    OUTLINE = 'org'
    MARKUP = 'md'

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, val: Union[str, NoteFormat]) -> NoteFormat:
        """Converts the parameter to a NoteFormat, if it isn't one already.

        Accepts an extension (``"org"``, ``".org"``) or a member name (``"outline"``), case-insensitively.
        Raises :exc:`ValueError` for anything else.
        """
        if isinstance(val, NoteFormat):
            return val
        lower = val.strip().lower().lstrip('.')
        for fmt in cls:
            if lower in (fmt.value, fmt.name.lower()):
                return fmt
        raise ValueError(f'Unknown note format: {val}')

    @classmethod
    def for_path(cls, path: str) -> Optional[NoteFormat]:
        """Returns the format matching the path's file extension, or None if it isn't a note file."""
        ext = os.path.splitext(path)[1]
        if not ext:
            return None
        for fmt in cls:
            if ext == f'.{fmt.value}':
                return fmt
        return None


def unique_tags(tags: Iterable[str]) -> List[str]:
    """Returns the tags with exact duplicates removed, keeping the first occurrence of each."""
    return list(dict.fromkeys(tags))


@dataclass
class Note:
    """A single note and everything that can be determined about it.

    Instances loaded from disk get their :attr:`created` value from the timestamp embedded in the id, and their
    :attr:`modified` value from the time they were loaded; neither is read from the metadata in the file.
    """

    id: str
    """Derived from the title and creation time when the note is created; also the filename stem."""

    title: str

    content: str = ''

    tags: List[str] = field(default_factory=list)
    """Tags in the order they should be written. Exact duplicates are removed on construction."""

    created: Optional[datetime] = None

    modified: Optional[datetime] = None

    format: NoteFormat = NoteFormat.PLAIN

    path: Optional[str] = None
    """The absolute path of the file this note was loaded from or saved to, if any."""

    def __post_init__(self):
        self.tags = unique_tags(self.tags)

    @property
    def filename(self) -> str:
        return f'{self.id}.{self.format.extension}'

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'tags': list(self.tags),
            'created': self.created.isoformat() if self.created else None,
            'modified': self.modified.isoformat() if self.modified else None,
            'format': self.format.extension,
            'filename': self.filename,
            'path': self.path,
        }


DATE_QUERY_LAYOUTS = [
    '%Y-%m-%d',
    '%Y/%m/%d',
    '%m/%d/%Y',
    '%d/%m/%Y',
    '%Y-%m-%d %H:%M:%S',
    '%Y/%m/%d %H:%M:%S',
]
"""Layouts tried, in order, when interpreting a date query."""


def parse_date_query(query: str) -> Optional[datetime]:
    """Returns the datetime for the first layout in :data:`DATE_QUERY_LAYOUTS` that parses the query, or None."""
    for layout in DATE_QUERY_LAYOUTS:
        try:
            return datetime.strptime(query, layout)
        except ValueError:
            continue
    return None


def matches_keyword(note: Note, keyword: str) -> bool:
    keyword = keyword.lower()
    return (keyword in note.title.lower()
            or keyword in note.content.lower()
            or any(keyword in t.lower() for t in note.tags))


def matches_tag(note: Note, tag: str) -> bool:
    tag = tag.strip().lower()
    return any(tag in t.lower() for t in note.tags)


def matches_date(note: Note, date_query: str) -> bool:
    """Checks whether the note was created on the date described by the query.

    If the query parses as a date, the note matches when its creation time falls within the 24 hours starting at
    midnight of that date. Otherwise the query is compared as a substring of the creation date in
    ``YYYY-MM-DD`` form.
    """
    date_query = date_query.strip().lower()
    if not note.created:
        return False
    target = parse_date_query(date_query)
    if target is None:
        return date_query in note.created.strftime('%Y-%m-%d')
    start = datetime(target.year, target.month, target.day, tzinfo=note.created.tzinfo)
    end = start + timedelta(hours=24)
    return start <= note.created < end


class NoteQuerySortField(Enum):
    CREATED = 'created'
    FILENAME = 'filename'
    MODIFIED = 'modified'
    TAGS_COUNT = 'tags'
    TITLE = 'title'


@dataclass
class NoteQuerySort:
    field: NoteQuerySortField

    reverse: bool = False
    """If True, sort descending."""

    ignore_case: bool = True
    """If True, strings are sorted as if they were lower case."""

    def key(self, note: Note) -> Union[str, int, datetime]:
        """Returns sort key for the given note for the :attr:`field` specified in this instance.

        This is affected by the value of :attr:`ignore_case`, but not the value of :attr:`reverse`.
        """
        if self.field == NoteQuerySortField.CREATED:
            return note.created or datetime.min
        elif self.field == NoteQuerySortField.MODIFIED:
            return note.modified or datetime.min
        elif self.field == NoteQuerySortField.FILENAME:
            return note.filename.lower() if self.ignore_case else note.filename
        elif self.field == NoteQuerySortField.TAGS_COUNT:
            return len(note.tags)
        elif self.field == NoteQuerySortField.TITLE:
            return note.title.lower() if self.ignore_case else note.title

    @classmethod
    def parse_list(cls, val: str) -> List[NoteQuerySort]:
        """Parses a comma-separated list of field names like ``created,-title``.

        A minus sign in front of a field name indicates to sort descending.
        Raises :exc:`ValueError` for unknown fields.
        """
        result = []
        for sortstr in val.lower().split(','):
            sortstr = sortstr.strip()
            if not sortstr:
                continue
            reverse = sortstr.startswith('-')
            if reverse:
                sortstr = sortstr[1:]
            result.append(cls(NoteQuerySortField(sortstr), reverse=reverse))
        return result


@dataclass
class NoteQuery:
    """Represents criteria for searching for notes.

    Some methods that take a NoteQuery parameter also accept strings as a convenience, which they
    pass to :meth:`parse`

    If multiple criteria are specified, the query should only return notes that satisfy *all* the criteria.
    """

    keyword: Optional[str] = None
    """If set, notes must contain this text (case-insensitively) in their title, content, or a tag."""

    tag: Optional[str] = None
    """If set, notes must have a tag containing this text, case-insensitively."""

    date: Optional[str] = None
    """If set, notes must have been created on this date; see :func:`matches_date`."""

    sort_by: List[NoteQuerySort] = field(default_factory=list)
    """Indicates how to sort the results. Sorts on the left take priority."""

    @classmethod
    def parse(cls, strquery: NoteQueryIsh) -> NoteQuery:
        """Converts the parameter to a NoteQuery, if it isn't one already.

        Query strings are split on spaces. Each part can be one of the following:

        * ``tag:TAG`` - notes must have a tag containing TAG
        * ``date:DATE`` - notes must have been created on DATE
        * ``sort:FIELD1,FIELD2`` - sort by the given fields
            * a minus sign in front of a field name indicates to sort descending, e.g. ``sort:-created``
            * supported fields: ``created``, ``filename``, ``modified``, ``tags`` (count), ``title``

        All other parts are joined with single spaces and used as the keyword.

        Examples:

        * ``"tag:work sort:-created budget"`` - notes tagged like "work" mentioning "budget", newest first
        """
        if isinstance(strquery, NoteQuery):
            return strquery
        query = cls()
        words = []
        for term in strquery.split():
            lower = term.lower()
            if lower.startswith('tag:'):
                query.tag = term[4:]
            elif lower.startswith('date:'):
                query.date = term[5:]
            elif lower.startswith('sort:'):
                query.sort_by.extend(NoteQuerySort.parse_list(lower[5:]))
            else:
                words.append(term)
        if words:
            query.keyword = ' '.join(words)
        return query

    def apply_filtering(self, notes: Iterable[Note]) -> Iterator[Note]:
        """Yields the entries from the given iterable which match the criteria of this query."""
        for note in notes:
            if self.keyword is not None and not matches_keyword(note, self.keyword):
                continue
            if self.tag is not None and not matches_tag(note, self.tag):
                continue
            if self.date is not None and not matches_date(note, self.date):
                continue
            yield note

    def apply_sorting(self, notes: Iterable[Note]) -> List[Note]:
        """Returns a copy of the given note collection sorted using this query's sort_by."""
        result = list(notes)
        for sort in reversed(self.sort_by):
            result.sort(key=sort.key, reverse=sort.reverse)
        return result


NoteQueryIsh = Union[str, NoteQuery]


@dataclass
class QueryResult:
    """The notes found by a catalog operation, in order, plus the files that could not be parsed.

    Behaves like a read-only list of :class:`Note`.
    """

    notes: List[Note] = field(default_factory=list)

    skipped: List = field(default_factory=list)
    """:class:`denotes.accessors.base.ParseError` instances for files that were left out."""

    def __iter__(self) -> Iterator[Note]:
        return iter(self.notes)

    def __len__(self) -> int:
        return len(self.notes)

    def __getitem__(self, index):
        return self.notes[index]

    def __bool__(self) -> bool:
        return bool(self.notes)

    def ids(self) -> List[str]:
        return [n.id for n in self.notes]
