"""Defines the API for accessing a user's collection of notes.

The most important class is :class:`Repo`.
"""

from typing import Dict, Iterable, Optional

from denotes.models import Note, NoteFormat, NoteQuery, NoteQueryIsh, QueryResult


class RepoError(Exception):
    """Base class for errors raised by repos."""


class DirectoryAccessError(RepoError):
    """Raised when a configured notes directory cannot be read. Aborts the whole operation."""
    def __init__(self, directory: str, cause: BaseException = None):
        reason = f': {cause.strerror or cause}' if isinstance(cause, OSError) else ''
        super().__init__(f'Failed to read notes directory {directory}{reason}')
        self.directory = directory
        self.cause = cause


class NoteNotFoundError(RepoError):
    """Raised when no file matches a requested note id."""
    def __init__(self, note_id: str, directory: str = None):
        where = f' in primary directory {directory}' if directory else ''
        super().__init__(f'Note not found{where}: {note_id}')
        self.note_id = note_id
        self.directory = directory


class Repo:
    """Base class for repos, which are responsible for reading, querying, and changing a user's collection of notes.

    Repo instances use :class:`denotes.accessors.base.Accessor` instances to read/write individual files,
    but add the operations that look at the configured directories as a whole.
    """
    def get(self, note_id: str) -> Note:
        """Loads the note with the given id, looking in every configured directory (primary first).

        Raises :exc:`NoteNotFoundError` if there is none, or :exc:`denotes.accessors.base.ParseError` if the file
        cannot be parsed.
        """
        raise NotImplementedError()

    def create(self, title: str, content: str = '', tags: Iterable[str] = (),
               fmt: NoteFormat = NoteFormat.PLAIN) -> Note:
        """Creates a new note file in the primary directory and returns the note.

        IO-related exceptions are not caught.
        """
        raise NotImplementedError()

    def update(self, note_id: str, title: str, content: str, tags: Iterable[str]) -> Note:
        """Replaces the title, content, and tags of an existing note, and returns the updated note.

        Only notes in the primary directory can be updated; others raise :exc:`NoteNotFoundError`. The note keeps
        its id, format, and file. IO-related exceptions are not caught.
        """
        raise NotImplementedError()

    def delete(self, note_id: str) -> None:
        """Deletes the file for the note, which must be in the primary directory.

        Raises :exc:`NoteNotFoundError` otherwise. IO-related exceptions are not caught.
        """
        raise NotImplementedError()

    def query(self, query: NoteQueryIsh = None) -> QueryResult:
        """Returns all notes matching the given query.

        Files that cannot be parsed are left out of the results and listed in :attr:`QueryResult.skipped`.
        Raises :exc:`DirectoryAccessError` if any configured directory cannot be read.
        """
        raise NotImplementedError()

    def tag_counts(self, query: NoteQueryIsh = None) -> Dict[str, int]:
        """Returns a map of tag names to the number of notes matching the query which possess that tag."""
        raise NotImplementedError()

    def close(self) -> None:
        """Release any resources associated with the repo. Should be called when you're done with an instance."""
        pass

    def list_notes(self) -> QueryResult:
        """Convenience method equivalent to calling query with an empty :class:`denotes.models.NoteQuery`"""
        return self.query(NoteQuery())

    def search(self, keyword: str, sort_by: Optional[list] = None) -> QueryResult:
        """Convenience method for notes whose title, content, or tags contain the keyword, case-insensitively."""
        return self.query(NoteQuery(keyword=keyword, sort_by=sort_by or []))

    def search_by_tag(self, tag: str, sort_by: Optional[list] = None) -> QueryResult:
        """Convenience method for notes with a tag containing the given text, case-insensitively."""
        return self.query(NoteQuery(tag=tag, sort_by=sort_by or []))

    def search_by_date(self, date_query: str, sort_by: Optional[list] = None) -> QueryResult:
        """Convenience method for notes created on the given date. See :func:`denotes.models.matches_date`."""
        return self.query(NoteQuery(date=date_query, sort_by=sort_by or []))
