from datetime import datetime
import pytest
from denotes.accessors.base import ParseError
from denotes.accessors.delegating import DelegatingAccessor, accessor_class
from denotes.accessors.outline import OutlineAccessor
from denotes.accessors.plain import PlainAccessor, MarkupAccessor
from denotes.models import Note, NoteFormat


def test_accessor_class():
    assert accessor_class(NoteFormat.PLAIN) is PlainAccessor
    assert accessor_class(NoteFormat.OUTLINE) is OutlineAccessor
    assert accessor_class(NoteFormat.MARKUP) is MarkupAccessor


def test_info_by_extension(fs):
    fs.create_file('/notes/20240101_000000_a.txt', contents='Title: Plain\n\nbody')
    fs.create_file('/notes/20240101_000000_b.org', contents='#+TITLE: Outline\n\nbody')
    fs.create_file('/notes/20240101_000000_c.md', contents='Title: Markup\n\n# body')
    assert DelegatingAccessor('/notes/20240101_000000_a.txt').info().title == 'Plain'
    outline = DelegatingAccessor('/notes/20240101_000000_b.org').info()
    assert outline.title == 'Outline'
    assert outline.format == NoteFormat.OUTLINE
    markup = DelegatingAccessor('/notes/20240101_000000_c.md').info()
    assert markup.title == 'Markup'
    assert markup.content == '# body'


def test_unrecognized_extension(fs):
    fs.create_file('/notes/picture.png', contents=b'\x89PNG')
    with pytest.raises(ParseError):
        DelegatingAccessor('/notes/picture.png').info()
    with pytest.raises(ParseError):
        DelegatingAccessor('/notes/picture.png').load()


def test_save_uses_note_format(fs):
    fs.create_dir('/notes')
    now = datetime(2024, 1, 1)
    note = Note(id='20240101_000000_x', title='X', content='c', created=now, modified=now, format=NoteFormat.OUTLINE)
    DelegatingAccessor('/notes/20240101_000000_x.org').save(note)
    with open('/notes/20240101_000000_x.org') as file:
        assert file.read().startswith('#+TITLE: X\n')
