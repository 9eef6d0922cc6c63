"""Command-line interface for denotes."""


import argparse
import json
import logging
import os.path
import sys
from typing import Iterable, List

from terminaltables import AsciiTable

from denotes.accessors.base import ParseError
from denotes.api import Denotes
from denotes.conf import ConfError, DenotesConf
from denotes.editor import EditorError
from denotes.models import Note, NoteFormat, NoteQuery, NoteQuerySort
from denotes.repos.base import RepoError

CLI_ERRORS = (RepoError, ParseError, ConfError, EditorError, OSError, ValueError)

MAX_TAGS_SHOWN = 6
MAX_CONTENT_SHOWN = 100


def _parse_tags(value: str) -> List[str]:
    if not value:
        return []
    return [t.strip() for t in value.split(',')]


def _print_note_summary(i: int, note: Note, show_tags: bool, show_content: bool) -> None:
    print(f'{i:2d}. {note.created:%Y-%m-%d %H:%M}  [{note.format.extension}]  {note.title}')
    if show_tags and note.tags:
        tags = ', '.join(note.tags[:MAX_TAGS_SHOWN])
        if len(note.tags) > MAX_TAGS_SHOWN:
            tags += '...'
        print(f'    Tags: {tags}')
    if show_content and note.content:
        content = note.content
        if len(content) > MAX_CONTENT_SHOWN:
            content = content[:MAX_CONTENT_SHOWN] + '...'
        print(f'    Content: {content}')
    print(f'    ID: {note.id}')
    print()


def _print_notes(notes: Iterable[Note], heading: str, args) -> None:
    notes = list(notes)
    if args.json:
        print(json.dumps([n.as_json() for n in notes]))
        return
    if args.table:
        data = [('ID', 'Created', 'Format', 'Title', 'Tags')]
        for note in notes:
            data.append((note.id, f'{note.created:%Y-%m-%d %H:%M}', note.format.extension, note.title,
                         '\n'.join(note.tags)))
        print(AsciiTable(data).table)
        return
    print(heading)
    print()
    for i, note in enumerate(notes, start=1):
        _print_note_summary(i, note, args.tags, args.content)


def _print_dirs(conf: DenotesConf) -> None:
    print(f'Notes directories ({len(conf.notes_dirs)} total):')
    for i, d in enumerate(conf.notes_dirs, start=1):
        print(f'  {i}. {d}')


def _init(args, conf_path: str) -> int:
    if os.path.exists(conf_path) and not args.force:
        raise ConfError(f'Config file already exists (use --force to replace it): {conf_path}')
    conf = DenotesConf(notes_dirs=args.dirs or DenotesConf().notes_dirs, editor=args.editor).standardize()
    for d in conf.notes_dirs:
        os.makedirs(d, exist_ok=True)
    conf.save(conf_path)
    print(f'Wrote {conf_path}')
    _print_dirs(conf)
    return 0


def _create(args, dn: Denotes) -> int:
    note = dn.repo.create(args.title, args.content or '', _parse_tags(args.tags), NoteFormat.parse(args.format))
    print('Note created successfully!')
    print(f'ID: {note.id}')
    print(f'Title: {note.title}')
    print(f'Format: {note.format.extension}')
    print(f'Filename: {note.filename}')
    if note.tags:
        print(f'Tags: {", ".join(note.tags)}')
    return 0


def _list(args, dn: Denotes) -> int:
    sort_by = NoteQuerySort.parse_list(args.sort) if args.sort else []
    result = dn.repo.query(NoteQuery(sort_by=sort_by))
    if not result and not (args.json or args.table):
        print('No notes found.')
        return 0
    _print_notes(result, f'Found {len(result)} notes', args)
    return 0


def _search(args, dn: Denotes) -> int:
    sort_by = NoteQuerySort.parse_list(args.sort) if args.sort else []
    if args.tag:
        result = dn.repo.search_by_tag(args.query, sort_by)
    elif args.date:
        result = dn.repo.search_by_date(args.query, sort_by)
    else:
        result = dn.repo.search(args.query, sort_by)
    if not result and not (args.json or args.table):
        print(f"No notes found matching '{args.query}'")
        return 0
    _print_notes(result, f"Found {len(result)} notes matching '{args.query}'", args)
    return 0


def _show(args, dn: Denotes) -> int:
    note = dn.repo.get(args.id)
    if args.json:
        print(json.dumps(note.as_json()))
        return 0
    print(f'ID: {note.id}')
    print(f'Title: {note.title}')
    print(f'Created: {note.created:%Y-%m-%d %H:%M:%S}')
    print(f'Format: {note.format.extension}')
    print(f'Path: {note.path}')
    if note.tags:
        print(f'Tags: {", ".join(note.tags)}')
    print()
    print(note.content)
    return 0


def _update(args, dn: Denotes) -> int:
    note = dn.repo.get(args.id)
    note = dn.repo.update(note.id,
                          args.title if args.title is not None else note.title,
                          args.content if args.content is not None else note.content,
                          _parse_tags(args.tags) if args.tags is not None else note.tags)
    print(f'Updated {note.filename}')
    return 0


def _delete(args, dn: Denotes) -> int:
    dn.repo.delete(args.id)
    print(f'Deleted {args.id}')
    return 0


def _edit(args, dn: Denotes) -> int:
    note = dn.edit(args.id)
    print(f'Edited {note.filename}')
    return 0


def _tags(args, dn: Denotes) -> int:
    counts = dn.repo.tag_counts(args.query or '')
    if args.json:
        print(json.dumps(counts))
    else:
        tags = sorted(counts.keys(), key=str.lower)
        data = [('Tag', 'Count')] + [(t, str(counts[t])) for t in tags]
        table = AsciiTable(data)
        table.justify_columns[1] = 'right'
        print(table.table)
    return 0


def _list_dirs(args, dn: Denotes) -> int:
    _print_dirs(dn.conf)
    return 0


def _add_dir(args, dn: Denotes) -> int:
    dn.add_dir(args.path)
    print(f'Successfully added notes directory: {args.path}')
    print()
    _print_dirs(dn.conf)
    return 0


def _remove_dir(args, dn: Denotes) -> int:
    dn.remove_dir(args.path)
    print(f'Successfully removed notes directory: {args.path}')
    print()
    _print_dirs(dn.conf)
    return 0


def _shell(args, dn: Denotes) -> int:
    from denotes.shell import NotesShell
    try:
        NotesShell(dn).cmdloop()
    except KeyboardInterrupt:
        print()
    return 0


def _add_output_args(p: argparse.ArgumentParser) -> None:
    p.add_argument('-c', '--content', action='store_true', help='Show (the beginning of) each note\'s content.')
    p.add_argument('-t', '--tags', action='store_true', help='Show each note\'s tags.')
    p.add_argument('-s', '--sort', help='Comma-separated fields to sort by: created, filename, modified, tags, '
                                        'title. Prefix a field with - to sort descending, e.g. "-created".')
    formats = p.add_mutually_exclusive_group()
    formats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    formats.add_argument('--table', action='store_true', help='Format output as a table.')


def argparser() -> argparse.ArgumentParser:
    formats_help = f'One of: {", ".join(f.extension for f in NoteFormat)}.'

    parser = argparse.ArgumentParser(
        prog='denotes',
        description='Manage notes stored as plain files. Run without a command to start the interactive shell.')
    parser.add_argument('--config', help=f'Config file (default is {DenotesConf.user_config_path()}).')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debugging information to stderr.')
    parser.set_defaults(func=_shell)

    subs = parser.add_subparsers(title='Commands')

    p_init = subs.add_parser('init', help='Create the config file. The given directories are created if needed; '
                                          'the first one is where new notes go.')
    p_init.add_argument('dirs', nargs='*', help='Notes directories. Defaults to ~/notes.')
    p_init.add_argument('-e', '--editor', help='Command to open notes with, e.g. "vim".')
    p_init.add_argument('-f', '--force', action='store_true', help='Replace an existing config file.')
    p_init.set_defaults(func=_init)

    p_create = subs.add_parser('create', help='Create a new note in the primary notes directory. It is saved with '
                                              'a unique ID based on the current time and the title.')
    p_create.add_argument('-t', '--title', required=True, help='Note title.')
    p_create.add_argument('-c', '--content', help='Note content. A literal \\n becomes a line break.')
    p_create.add_argument('-g', '--tags', help='Comma-separated tags.')
    p_create.add_argument('-f', '--format', default='txt', help=f'Note format. {formats_help} Default is txt.')
    p_create.set_defaults(func=_create)

    p_list = subs.add_parser('list', help='List all notes in all notes directories.')
    _add_output_args(p_list)
    p_list.set_defaults(func=_list)

    p_search = subs.add_parser('search', help='Search notes. By default, matches the query case-insensitively '
                                              'against titles, content, and tags.')
    p_search.add_argument('query')
    search_kinds = p_search.add_mutually_exclusive_group()
    search_kinds.add_argument('--tag', action='store_true', help='Match the query against tags only.')
    search_kinds.add_argument('--date', action='store_true',
                              help='Match notes created on the date given as the query, e.g. 2024-12-01, '
                                   '2024/12/01, or 12/01/2024. Other text is matched against YYYY-MM-DD.')
    _add_output_args(p_search)
    p_search.set_defaults(func=_search)

    p_show = subs.add_parser('show', help='Show a note. The ID may be abbreviated to a unique prefix.')
    p_show.add_argument('id')
    p_show.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_show.set_defaults(func=_show)

    p_update = subs.add_parser('update', help='Replace the title, content, or tags of a note. Fields that are '
                                              'not given keep their current values.')
    p_update.add_argument('id')
    p_update.add_argument('-t', '--title', help='New title. The ID and filename do not change.')
    p_update.add_argument('-c', '--content', help='New content.')
    p_update.add_argument('-g', '--tags', help='New comma-separated tags.')
    p_update.set_defaults(func=_update)

    p_delete = subs.add_parser('delete', help='Delete a note.')
    p_delete.add_argument('id')
    p_delete.set_defaults(func=_delete)

    p_edit = subs.add_parser('edit', help='Open a note in your editor ($VISUAL, $EDITOR, or the system default).')
    p_edit.add_argument('id')
    p_edit.set_defaults(func=_edit)

    p_tags = subs.add_parser('tags', help='Show a list of tags and the number of notes that have each tag.')
    p_tags.add_argument('query', nargs='?',
                        help='Query to filter notes by, e.g. "tag:work sort:-created budget". '
                             'If omitted, all notes are counted.')
    p_tags.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_tags.set_defaults(func=_tags)

    p_list_dirs = subs.add_parser('list-dirs', help='List the configured notes directories.')
    p_list_dirs.set_defaults(func=_list_dirs)

    p_add_dir = subs.add_parser('add-dir', help='Add a notes directory. It is created if it does not exist.')
    p_add_dir.add_argument('path')
    p_add_dir.set_defaults(func=_add_dir)

    p_remove_dir = subs.add_parser('remove-dir', help='Stop searching a notes directory. No files are deleted, '
                                                      'and at least one directory must remain.')
    p_remove_dir.add_argument('path')
    p_remove_dir.set_defaults(func=_remove_dir)

    p_shell = subs.add_parser('shell', help='Browse and change notes interactively.')
    p_shell.set_defaults(func=_shell)

    return parser


def _open(conf_path: str) -> Denotes:
    if not os.path.exists(conf_path):
        raise ConfError(f'You need to create the config file (try `denotes init`): {conf_path}')
    return Denotes(DenotesConf.load(conf_path), conf_path)


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    conf_path = os.path.expanduser(args.config) if args.config else DenotesConf.user_config_path()
    try:
        if args.func == _init:
            return _init(args, conf_path)
        with _open(conf_path) as dn:
            return args.func(args, dn)
    except CLI_ERRORS as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
