"""Provides the :class:`DirectRepo` class."""

from collections import defaultdict
from datetime import datetime
import logging
import os
import os.path
from typing import Dict, Iterable, Iterator, List, Optional

from denotes.accessors.base import ParseError
from denotes.accessors.delegating import DelegatingAccessor
from denotes.conf import DenotesConf
from denotes.ids import make_id, find_available_id
from denotes.models import Note, NoteFormat, NoteQuery, NoteQueryIsh, QueryResult, unique_tags
from denotes.repos.base import Repo, DirectoryAccessError, NoteNotFoundError

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


def is_note_filename(filename: str) -> bool:
    return not filename.startswith('.') and NoteFormat.for_path(filename) is not None


class DirectRepo(Repo):
    """Accesses notes directly on the filesystem without any caching.

    Every read scans the configured directories and parses the files again, so changes made outside this
    class (for example in an editor) are always picked up.

    .. attribute:: conf
       :type: DenotesConf
    """
    def __init__(self, conf: DenotesConf):
        self.conf = conf
        if not conf.notes_dirs:
            raise ValueError('`notes_dirs` must be non-empty in DenotesConf.')
        self.accessor_factory = DelegatingAccessor

    def _note_paths_in(self, directory: str) -> List[str]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise DirectoryAccessError(directory, e)
        return [e.path for e in entries if is_note_filename(e.name) and e.is_file()]

    def _note_paths(self) -> Iterator[str]:
        for directory in self.conf.notes_dirs:
            yield from self._note_paths_in(directory)

    def _load_all(self) -> QueryResult:
        result = QueryResult()
        for path in self._note_paths():
            try:
                result.notes.append(self.accessor_factory(path).info())
            except ParseError as e:
                logger.debug('Skipping %s: %s', path, e.message)
                result.skipped.append(e)
            except OSError as e:
                logger.debug('Skipping %s: %s', path, e)
                result.skipped.append(ParseError('Could not read file', path, e))
        return result

    def _find_path(self, note_id: str, directories: List[str]) -> Optional[str]:
        if not note_id:
            return None
        prefixed = None
        for directory in directories:
            for path in self._note_paths_in(directory):
                stem = os.path.splitext(os.path.basename(path))[0]
                if stem == note_id:
                    return path
                if prefixed is None and stem.startswith(note_id):
                    prefixed = path
        return prefixed

    def _find_primary_path(self, note_id: str) -> str:
        # changes are only made in the primary directory
        path = self._find_path(note_id, [self.conf.primary_dir])
        if not path:
            raise NoteNotFoundError(note_id, self.conf.primary_dir)
        return path

    def get(self, note_id: str) -> Note:
        path = self._find_path(note_id, self.conf.notes_dirs)
        if not path:
            raise NoteNotFoundError(note_id)
        return self.accessor_factory(path).info()

    def create(self, title: str, content: str = '', tags: Iterable[str] = (),
               fmt: NoteFormat = NoteFormat.PLAIN) -> Note:
        if not title:
            raise ValueError('A note must have a title.')
        fmt = NoteFormat.parse(fmt)
        directory = self.conf.primary_dir
        os.makedirs(directory, exist_ok=True)
        now = _now()
        note_id = find_available_id(directory, make_id(title, now))
        note = Note(id=note_id, title=title, content=content, tags=list(tags),
                    created=now, modified=now, format=fmt)
        note.path = os.path.join(directory, note.filename)
        self.accessor_factory(note.path).save(note)
        logger.debug('Created %s', note.path)
        return note

    def update(self, note_id: str, title: str, content: str, tags: Iterable[str]) -> Note:
        note = self.accessor_factory(self._find_primary_path(note_id)).info()
        note.title = title
        note.content = content
        note.tags = unique_tags(tags)
        note.modified = _now()
        self.accessor_factory(note.path).save(note)
        logger.debug('Updated %s', note.path)
        return note

    def delete(self, note_id: str) -> None:
        path = self._find_primary_path(note_id)
        os.remove(path)
        logger.debug('Deleted %s', path)

    def query(self, query: NoteQueryIsh = None) -> QueryResult:
        query = NoteQuery.parse(query or NoteQuery())
        loaded = self._load_all()
        filtered = query.apply_filtering(loaded.notes)
        return QueryResult(query.apply_sorting(filtered), loaded.skipped)

    def tag_counts(self, query: NoteQueryIsh = None) -> Dict[str, int]:
        result = defaultdict(int)
        for note in self.query(query):
            for tag in note.tags:
                result[tag] += 1
        return dict(result)
