"""Provides the :class:`DelegatingAccessor` class."""

from denotes.accessors.base import Accessor, ParseError
from denotes.accessors.outline import OutlineAccessor
from denotes.accessors.plain import MarkupAccessor, PlainAccessor
from denotes.models import Note, NoteFormat

ACCESSORS = {
    NoteFormat.PLAIN: PlainAccessor,
    NoteFormat.OUTLINE: OutlineAccessor,
    NoteFormat.MARKUP: MarkupAccessor,
}
"""Maps every :class:`NoteFormat` to the accessor for its dialect."""


def accessor_class(fmt: NoteFormat) -> type:
    return ACCESSORS[fmt]


class DelegatingAccessor(Accessor):
    """Responsible for choosing what :class:`denotes.accessors.base.Accessor` subclass to use for a given file.

    This selects an accessor based on the path's file extension, and delegates method calls to that accessor:

    * ``.txt`` -> :class:`PlainAccessor`
    * ``.org`` -> :class:`OutlineAccessor`
    * ``.md`` -> :class:`MarkupAccessor`

    Any other extension raises :exc:`ParseError` when the file is loaded.
    """
    def __init__(self, path: str):
        super().__init__(path)
        fmt = NoteFormat.for_path(path)
        self.accessor = accessor_class(fmt)(path) if fmt else None

    def load(self):
        if not self.accessor:
            raise ParseError('Unrecognized note file extension', self.path)
        self.accessor.load()

    def info(self) -> Note:
        if not self.accessor:
            raise ParseError('Unrecognized note file extension', self.path)
        return self.accessor.info()

    def save(self, note: Note) -> None:
        accessor_class(note.format)(self.path).save(note)
