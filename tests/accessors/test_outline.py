from datetime import datetime
from freezegun import freeze_time
from denotes.accessors.outline import parse, format_note, OutlineAccessor
from denotes.models import Note, NoteFormat


def test_parse():
    doc = """#+TITLE: Weekly review
#+DATE: 2024-12-01
#+TAGS: work urgent

* Review :work:planning:
Went over the backlog.
"""
    title, content, tags = parse(doc)
    assert title == 'Weekly review'
    assert content == '* Review :work:planning:\nWent over the backlog.'
    assert sorted(tags) == ['planning', 'urgent', 'work']
    assert tags == ['work', 'urgent', 'planning']


def test_parse_directives_are_case_insensitive():
    doc = '#+title: lower\n#+FileTags: :a:b:\n#+tags: c\n\nbody'
    assert parse(doc) == ('lower', 'body', ['a', 'b', 'c'])


def test_parse_last_nonempty_title_wins():
    doc = '#+TITLE: First\n#+TITLE: Second\n#+TITLE:\n\nbody'
    assert parse(doc)[0] == 'Second'


def test_parse_skips_unknown_directives_before_content():
    doc = '#+TITLE: T\n#+AUTHOR: someone\n#+STARTUP: overview\n\n  \nHello'
    assert parse(doc) == ('T', 'Hello', [])


def test_parse_directives_after_content_are_content():
    doc = '#+TITLE: T\n\nFirst line\n#+TITLE: Not the title\n#+TAGS: nope'
    title, content, tags = parse(doc)
    assert title == 'T'
    assert content == 'First line\n#+TITLE: Not the title\n#+TAGS: nope'
    assert tags == []


def test_parse_heading_tags():
    doc = """#+TITLE: Headings

* First :alpha:
Some text :not:a:heading:
** Nested heading :beta:gamma:
* No tags here
* Trailing colon only :
*    Spaced :delta:
"""
    assert parse(doc)[2] == ['alpha', 'beta', 'gamma', 'delta']


def test_parse_no_directives():
    assert parse('* Just a heading\ntext') == ('', '* Just a heading\ntext', [])
    assert parse('') == ('', '', [])


def test_format_note():
    note = Note(id='x', title='Weekly', content='* Heading\\nbody', tags=['work', 'urgent'],
                created=datetime(2024, 12, 1, 14, 30, 22), modified=datetime(2024, 12, 2, 9, 0, 0))
    assert format_note(note) == """#+TITLE: Weekly
#+DATE: 2024-12-01
#+MODIFIED: 2024-12-02
#+TAGS: work urgent

* Heading
body"""


def test_format_note_without_tags():
    note = Note(id='x', title='T', content='c', created=datetime(2024, 1, 1), modified=datetime(2024, 1, 1))
    assert format_note(note) == '#+TITLE: T\n#+DATE: 2024-01-01\n#+MODIFIED: 2024-01-01\n\nc'


def test_round_trip():
    created = datetime(2024, 12, 1, 14, 30, 22)
    cases = [
        ('Simple', [], 'Body'),
        ('With tags', ['work', 'urgent'], 'First\nSecond'),
        ('Heading tags already listed', ['work', 'planning'], '* Review :work:planning:\nDetails'),
        ('Empty content', ['only'], ''),
    ]
    for title, tags, content in cases:
        note = Note(id='x', title=title, content=content, tags=tags, created=created, modified=created)
        assert parse(format_note(note)) == (title, content, tags)


@freeze_time('2025-01-01 08:00:00')
def test_info(fs):
    path = '/notes/20241201_143022_weekly_review.org'
    fs.create_file(path, contents='#+TITLE: Weekly review\n#+TAGS: work urgent\n\n* Review :work:planning:\n')
    note = OutlineAccessor(path).info()
    assert note == Note(id='20241201_143022_weekly_review', title='Weekly review',
                        content='* Review :work:planning:', tags=['work', 'urgent', 'planning'],
                        created=datetime(2024, 12, 1, 14, 30, 22), modified=datetime(2025, 1, 1, 8, 0, 0),
                        format=NoteFormat.OUTLINE, path=path)


@freeze_time('2024-12-01 14:30:22')
def test_save(fs):
    path = '/notes/20241201_143022_t.org'
    fs.create_dir('/notes')
    now = datetime(2024, 12, 1, 14, 30, 22)
    OutlineAccessor(path).save(Note(id='20241201_143022_t', title='T', content='* H :x:\nbody', tags=['y'],
                                    created=now, modified=now, format=NoteFormat.OUTLINE))
    with open(path) as file:
        assert file.read() == '#+TITLE: T\n#+DATE: 2024-12-01\n#+MODIFIED: 2024-12-01\n#+TAGS: y\n\n* H :x:\nbody'
    assert OutlineAccessor(path).info().tags == ['y', 'x']
