"""Defines the API for reading and writing individual note files.

The most important class is :class:`Accessor`.
"""

from datetime import datetime
import os.path
from typing import List, Tuple

from denotes.ids import created_from_id
from denotes.models import Note, NoteFormat


class ParseError(Exception):
    """Raised when an :class:`Accessor` is unable to parse a file."""
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(f'{message}: {path}')
        self.message = message
        self.path = path
        self.cause = cause


def expand_newline_escapes(content: str) -> str:
    """Replaces literal two-character ``\\n`` sequences with real line breaks."""
    return content.replace('\\n', '\n')


class Accessor:
    """Base class for accessors, which are responsible for reading and writing one dialect of note file.

    Each instance is for working with a single file, specified to the constructor.

    Subclasses provide the dialect through :meth:`_parse` and :meth:`_format`; the base class takes care
    of reading and writing the file and of the fields that come from the filename rather than the contents.

    .. attribute:: path
       :type: str
    """
    def __init__(self, path: str):
        self.path = path
        self._loaded = False
        self.title = ''
        self.content = ''
        self.tags = []

    def load(self) -> None:
        """Attempts to parse the file. This does not normally need to be called explicitly.

        It will be called by :meth:`info` when necessary.

        May raise :exc:`ParseError`, or an IO-related exception if the file cannot be opened.
        """
        try:
            self._load()
        except Exception as e:
            self._loaded = False
            raise e
        self._loaded = True

    def info(self) -> Note:
        """Returns the note stored in the file.

        The id comes from the filename, and the creation time from the id (or the current time, if the id
        does not start with a timestamp). The modification time is always the current time.

        May raise :exc:`ParseError`.
        """
        if not self._loaded:
            self.load()
        filename = os.path.basename(self.path)
        note_id, _ = os.path.splitext(filename)
        now = datetime.now().replace(microsecond=0)
        return Note(id=note_id,
                    title=self.title,
                    content=self.content,
                    tags=list(self.tags),
                    created=created_from_id(note_id) or now,
                    modified=now,
                    format=NoteFormat.for_path(self.path) or NoteFormat.PLAIN,
                    path=self.path)

    def save(self, note: Note) -> None:
        """Writes the given note to the file, replacing whatever the file contained.

        IO-related exceptions are not caught.
        """
        text = self._format(note)
        with open(self.path, 'w', encoding='utf-8') as file:
            file.write(text)
        self.title, self.content, self.tags = note.title, note.content, list(note.tags)
        self._loaded = True

    def _load(self) -> None:
        try:
            with open(self.path, 'r', encoding='utf-8') as file:
                text = file.read()
        except UnicodeDecodeError as e:
            raise ParseError('File is not valid UTF-8 text', self.path, e)
        if '\0' in text:
            raise ParseError('File contains binary data', self.path)
        self.title, self.content, self.tags = self._parse(text)

    def _parse(self, text: str) -> Tuple[str, str, List[str]]:
        """Subclasses should override this to return the title, content, and tags found in the text."""
        raise NotImplementedError()

    def _format(self, note: Note) -> str:
        """Subclasses should override this to return the full file contents for the note."""
        raise NotImplementedError()
