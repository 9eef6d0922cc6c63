import io
import os.path
from freezegun import freeze_time
from denotes.api import Denotes
from denotes.conf import DenotesConf
from denotes.shell import NotesShell, split_tags


def make_shell(answers='', editor=None):
    dn = Denotes(DenotesConf(notes_dirs=['/notes'], editor=editor))
    out = io.StringIO()
    return NotesShell(dn, stdin=io.StringIO(answers), stdout=out), out


def setup_notes(fs):
    fs.create_file('/notes/20241201_143022_a.txt', contents='Title: First\nTags: work, urgent\n\nHello there')
    fs.create_file('/notes/20241202_090000_b.org', contents='#+TITLE: Second\n\n* Heading :home:\n')


def test_split_tags():
    assert split_tags('a, b ,c') == ['a', 'b', 'c']
    assert split_tags('   ') == []


def test_list(fs):
    setup_notes(fs)
    shell, out = make_shell()
    shell.onecmd('list')
    assert out.getvalue() == """2 notes
  1. 2024-12-01 14:30  [txt]  First  (work, urgent)
  2. 2024-12-02 09:00  [org]  Second  (home)
"""
    out.truncate(0)
    out.seek(0)
    shell.onecmd('list -created')
    assert [n.title for n in shell.notes] == ['Second', 'First']


def test_list_empty_and_skipped(fs):
    fs.create_dir('/notes')
    shell, out = make_shell()
    shell.onecmd('list')
    assert out.getvalue() == 'No notes found.\n'
    fs.create_file('/notes/20241201_143022_a.txt', contents='Title: First\n')
    fs.create_file('/notes/20241201_143023_bad.txt', contents=b'\x89PNG\r\n\x1a\n\x00\x00\xff\xd8')
    shell.onecmd('list')
    assert out.getvalue().endswith('1 notes\n  1. 2024-12-01 14:30  [txt]  First\n(1 unreadable file(s) skipped)\n')


def test_searches(fs):
    setup_notes(fs)
    shell, out = make_shell()
    shell.onecmd('search HELLO')
    assert [n.title for n in shell.notes] == ['First']
    shell.onecmd('tag hom')
    assert [n.title for n in shell.notes] == ['Second']
    shell.onecmd('date 2024-12-01')
    assert [n.title for n in shell.notes] == ['First']
    shell.onecmd('tag zz')
    assert shell.notes == []
    assert out.getvalue().endswith('No notes found.\n')
    shell.onecmd('search')
    assert out.getvalue().endswith('Usage: search TEXT\n')


def test_show(fs):
    setup_notes(fs)
    shell, out = make_shell()
    shell.onecmd('list')
    out.truncate(0)
    out.seek(0)
    shell.onecmd('show 1')
    assert out.getvalue() == """ID: 20241201_143022_a
Title: First
Created: 2024-12-01 14:30:22
Format: txt
Tags: work, urgent

Hello there
"""


def test_bad_note_numbers(fs):
    setup_notes(fs)
    shell, out = make_shell()
    shell.onecmd('list')
    shell.onecmd('show')
    assert out.getvalue().endswith('Give the number of a note from the current listing.\n')
    shell.onecmd('show 3')
    assert out.getvalue().endswith('No note number 3 in the current listing.\n')
    shell.onecmd('delete 0')
    assert out.getvalue().endswith('No note number 0 in the current listing.\n')


@freeze_time('2024-12-03 10:00:00')
def test_new(fs):
    fs.create_dir('/notes')
    shell, out = make_shell('Shopping list\nhome, errands\norg\n* Milk\n')
    shell.onecmd('new')
    path = '/notes/20241203_100000_shopping_list.org'
    assert os.path.exists(path)
    assert 'Created 20241203_100000_shopping_list.org\n' in out.getvalue()
    assert [n.title for n in shell.notes] == ['Shopping list']
    assert shell.notes[0].tags == ['home', 'errands']
    assert shell.notes[0].content == '* Milk'


@freeze_time('2024-12-03 10:00:00')
def test_new_defaults_and_cancel(fs):
    fs.create_dir('/notes')
    shell, out = make_shell('Plain one\n\n\nBody\n')
    shell.onecmd('new')
    assert os.path.exists('/notes/20241203_100000_plain_one.txt')
    shell, out = make_shell('\n')
    shell.onecmd('new')
    assert out.getvalue().endswith('Cancelled: a title is required.\n')
    shell, out = make_shell('Half done\n')
    shell.onecmd('new')
    assert out.getvalue().endswith('\nCancelled.\n')
    assert not os.path.exists('/notes/20241203_100000_half_done.txt')


def test_new_bad_format(fs):
    fs.create_dir('/notes')
    shell, out = make_shell('Title\n\npdf\n')
    shell.onecmd('new')
    assert out.getvalue().endswith('Error: Unknown note format: pdf\n')
    assert os.listdir('/notes') == []


def test_update(fs):
    setup_notes(fs)
    shell, out = make_shell('\nnew, tags\nNew body\n')
    shell.onecmd('list')
    shell.onecmd('update 1')
    assert 'Updated 20241201_143022_a.txt\n' in out.getvalue()
    note = shell.dn.repo.get('20241201_143022_a')
    assert (note.title, note.tags, note.content) == ('First', ['new', 'tags'], 'New body')


def test_update_keeps_everything_on_empty_answers(fs):
    setup_notes(fs)
    shell, out = make_shell('\n\n\n')
    shell.onecmd('list')
    shell.onecmd('update 2')
    note = shell.dn.repo.get('20241202_090000_b')
    assert (note.title, note.tags, note.content) == ('Second', ['home'], '* Heading :home:')


def test_delete(fs):
    setup_notes(fs)
    shell, out = make_shell('n\ny\n')
    shell.onecmd('list')
    shell.onecmd('delete 1')
    assert out.getvalue().endswith('Delete "First"? (y/n) Cancelled.\n')
    assert os.path.exists('/notes/20241201_143022_a.txt')
    shell.onecmd('delete 1')
    assert 'Deleted 20241201_143022_a.txt\n' in out.getvalue()
    assert not os.path.exists('/notes/20241201_143022_a.txt')
    assert [n.title for n in shell.notes] == ['Second']


def test_edit(fs, mocker):
    setup_notes(fs)
    shell, out = make_shell(editor='myeditor')
    run = mocker.patch('subprocess.run')
    shell.onecmd('list')
    shell.onecmd('edit 2')
    run.assert_called_once_with(['myeditor', '/notes/20241202_090000_b.org'], check=True)


def test_errors_do_not_end_loop(fs, mocker):
    setup_notes(fs)
    shell, out = make_shell(editor='myeditor')
    mocker.patch('subprocess.run', side_effect=OSError('no such editor'))
    shell.onecmd('list')
    assert shell.onecmd('edit 1') is False
    assert 'Error: Failure editing file /notes/20241201_143022_a.txt' in out.getvalue()
    assert shell.onecmd('list bogus') is False
    assert shell.onecmd('frobnicate') is None
    assert out.getvalue().endswith("No such command. See 'help'.\n")


def test_aliases(fs, mocker):
    setup_notes(fs)
    shell, out = make_shell('y\n', editor='myeditor')
    run = mocker.patch('subprocess.run')
    shell.onecmd('ls')
    shell.onecmd('s hello')
    assert [n.title for n in shell.notes] == ['First']
    shell.onecmd('e 1')
    run.assert_called_once_with(['myeditor', '/notes/20241201_143022_a.txt'], check=True)
    shell.onecmd('r')
    assert len(shell.notes) == 2
    shell.onecmd('d 2')
    assert not os.path.exists('/notes/20241202_090000_b.org')
    assert shell.onecmd('q') is True
    shell.onecmd('help aliases')
    assert out.getvalue().endswith('n = new, s = search, e = edit, d = delete, r = refresh, q = quit, ls = list\n')


def test_cmdloop(fs):
    setup_notes(fs)
    shell, out = make_shell('search second\nshow 1\nquit\n')
    shell.cmdloop()
    text = out.getvalue()
    assert text.startswith('denotes shell. Enter command (or "help").\n2 notes\n')
    assert 'Notes matching \'second\'\n  1. 2024-12-02 09:00  [org]  Second  (home)\n' in text
    assert 'Title: Second\n' in text


def test_cmdloop_ends_at_eof(fs):
    fs.create_dir('/notes')
    shell, out = make_shell('list\n')
    shell.cmdloop()
    assert out.getvalue().endswith('notes> \n')
