"""Interactive shell for browsing and changing notes."""

from cmd import Cmd
import logging
from typing import List, Optional

from denotes.accessors.base import ParseError
from denotes.api import Denotes
from denotes.conf import ConfError
from denotes.editor import EditorError
from denotes.models import Note, NoteFormat, NoteQuery, NoteQuerySort
from denotes.repos.base import RepoError

logger = logging.getLogger(__name__)

RECOVERABLE_ERRORS = (RepoError, ParseError, EditorError, ConfError, OSError, ValueError)

ALIASES = {
    'n': 'new',
    's': 'search',
    'e': 'edit',
    'd': 'delete',
    'r': 'refresh',
    'q': 'quit',
    'ls': 'list',
}
"""Short forms of the most used commands. See ``help aliases``."""


def split_tags(value: str) -> List[str]:
    return [t.strip() for t in value.split(',')] if value.strip() else []


class NotesShell(Cmd):
    """Provides a command loop over the current listing of notes.

    Notes are addressed by their 1-based position in the most recent listing or search results. Errors are
    reported on a single line and never end the loop.

    .. attribute:: notes
       :type: List[Note]

       The current listing.
    """
    prompt = 'notes> '
    doc_header = 'Commands (for more info type: help COMMAND):'

    def __init__(self, dn: Denotes, stdin=None, stdout=None):
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.dn = dn
        self.notes: List[Note] = []

    def _print(self, text: str = '') -> None:
        self.stdout.write(text + '\n')

    def _ask(self, question: str) -> str:
        if self.use_rawinput:
            return input(question)
        self.stdout.write(question)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError()
        return line.rstrip('\r\n')

    def _show_listing(self, heading: str) -> None:
        if not self.notes:
            self._print('No notes found.')
            return
        self._print(heading)
        for i, note in enumerate(self.notes, start=1):
            tags = f'  ({", ".join(note.tags)})' if note.tags else ''
            self._print(f'{i:3d}. {note.created:%Y-%m-%d %H:%M}  [{note.format.extension}]  {note.title}{tags}')

    def _replace_listing(self, notes, heading: str) -> None:
        self.notes = list(notes)
        skipped = len(getattr(notes, 'skipped', []))
        self._show_listing(heading)
        if skipped:
            self._print(f'({skipped} unreadable file(s) skipped)')

    def _note_at(self, arg: str) -> Optional[Note]:
        try:
            index = int(arg.strip())
        except ValueError:
            self._print('Give the number of a note from the current listing.')
            return None
        if not 1 <= index <= len(self.notes):
            self._print(f'No note number {index} in the current listing.')
            return None
        return self.notes[index - 1]

    def onecmd(self, line):
        try:
            return super().onecmd(line)
        except RECOVERABLE_ERRORS as e:
            logger.debug('Command failed: %s', line, exc_info=True)
            self._print(f'Error: {e}')
            return False

    def preloop(self):
        self._print('denotes shell. Enter command (or "help").')
        self.onecmd('list')

    def emptyline(self):
        """Ignore empty line entry."""

    def default(self, line):
        command, arg, _ = self.parseline(line)
        if command in ALIASES:
            return self.onecmd(f'{ALIASES[command]} {arg}'.strip())
        self._print("No such command. See 'help'.")

    def help_aliases(self):
        self._print(', '.join(f'{short} = {full}' for short, full in ALIASES.items()))

    def do_list(self, arg):
        """list [SORT]
        List all notes. SORT is a comma-separated list of fields (created, filename, modified, tags, title);
        prefix a field with - to sort descending."""
        sort_by = NoteQuerySort.parse_list(arg) if arg.strip() else []
        result = self.dn.repo.query(NoteQuery(sort_by=sort_by))
        self._replace_listing(result, f'{len(result)} notes')

    def do_search(self, arg):
        """search TEXT
        Show notes whose title, content, or tags contain TEXT."""
        if not arg:
            self._print('Usage: search TEXT')
            return
        self._replace_listing(self.dn.repo.search(arg), f'Notes matching {arg!r}')

    def do_tag(self, arg):
        """tag TEXT
        Show notes with a tag containing TEXT."""
        if not arg.strip():
            self._print('Usage: tag TEXT')
            return
        self._replace_listing(self.dn.repo.search_by_tag(arg), f'Notes tagged like {arg.strip()!r}')

    def do_date(self, arg):
        """date DATE
        Show notes created on DATE, e.g. 2024-12-01 or 12/01/2024. Partial dates like 2024-12 match
        as text."""
        if not arg.strip():
            self._print('Usage: date DATE')
            return
        self._replace_listing(self.dn.repo.search_by_date(arg), f'Notes created on {arg.strip()!r}')

    def do_show(self, arg):
        """show N
        Show the full note number N from the current listing."""
        note = self._note_at(arg)
        if not note:
            return
        note = self.dn.repo.get(note.id)
        self._print(f'ID: {note.id}')
        self._print(f'Title: {note.title}')
        self._print(f'Created: {note.created:%Y-%m-%d %H:%M:%S}')
        self._print(f'Format: {note.format.extension}')
        if note.tags:
            self._print(f'Tags: {", ".join(note.tags)}')
        self._print()
        self._print(note.content)

    def do_new(self, arg):
        """new
        Create a note. You will be asked for the title, tags, format, and content."""
        try:
            title = self._ask('Title: ').strip()
            if not title:
                self._print('Cancelled: a title is required.')
                return
            tags = split_tags(self._ask('Tags (comma-separated): '))
            fmt = NoteFormat.parse(self._ask('Format (txt, org, md) [txt]: ').strip() or 'txt')
            content = self._ask('Content: ')
        except (EOFError, KeyboardInterrupt):
            self._print('\nCancelled.')
            return
        note = self.dn.repo.create(title, content, tags, fmt)
        self._print(f'Created {note.filename}')
        self.do_refresh('')

    def do_update(self, arg):
        """update N
        Change the title, tags, and content of note number N. Leave an answer empty to keep the current value."""
        note = self._note_at(arg)
        if not note:
            return
        note = self.dn.repo.get(note.id)
        try:
            title = self._ask(f'Title [{note.title}]: ').strip() or note.title
            tags_answer = self._ask(f'Tags [{", ".join(note.tags)}]: ')
            content = self._ask('Content [unchanged]: ') or note.content
        except (EOFError, KeyboardInterrupt):
            self._print('\nCancelled.')
            return
        tags = split_tags(tags_answer) if tags_answer.strip() else note.tags
        self.dn.repo.update(note.id, title, content, tags)
        self._print(f'Updated {note.filename}')
        self.do_refresh('')

    def do_edit(self, arg):
        """edit N
        Open note number N in your editor. The listing is reloaded when the editor exits."""
        note = self._note_at(arg)
        if not note:
            return
        self.dn.edit(note.id)
        self.do_refresh('')

    def do_delete(self, arg):
        """delete N
        Delete note number N after confirmation."""
        note = self._note_at(arg)
        if not note:
            return
        try:
            answer = self._ask(f'Delete "{note.title}"? (y/n) ')
        except (EOFError, KeyboardInterrupt):
            answer = ''
        if answer.strip().lower() not in ('y', 'yes'):
            self._print('Cancelled.')
            return
        self.dn.repo.delete(note.id)
        self._print(f'Deleted {note.filename}')
        self.do_refresh('')

    def do_refresh(self, arg):
        """refresh
        Reload all notes from disk."""
        result = self.dn.repo.list_notes()
        self._replace_listing(result, f'{len(result)} notes')

    def do_quit(self, arg):
        """quit
        Leave the shell."""
        return True

    do_exit = do_quit

    def do_EOF(self, arg):
        self._print()
        return True
