from pathlib import PurePosixPath

import pytest

from coursebook.book import Book, Chapter
from coursebook.course import Courses
from coursebook.replacements import replace


def make_chapter(name, path, content):
    return Chapter(name=name, content=content, path=PurePosixPath(path),
                   source_path=PurePosixPath(path))


@pytest.fixture
def structure():
    top = make_chapter("Seg", "seg.md",
                       "---\ncourse: Fundamentals\nsession: Day 1\nminutes: 10\n---\nx")
    book = Book(sections=[top, make_chapter("Two", "two.md", "---\nminutes: 20\n---\ny")])
    courses, _ = Courses.extract_structure(book)
    course = courses.find_course("Fundamentals")
    session = course.sessions[0]
    return courses, course, session, session.segments[0]


def test_session_outline(structure):
    courses, course, session, segment = structure
    ch = make_chapter("C", "c.md", "A {{% session outline }} B")
    replace(courses, course, session, segment, ch)
    assert ch.content == f"A {session.outline()} B"


def test_segment_and_course_outline(structure):
    courses, course, session, segment = structure
    ch = make_chapter("C", "c.md", "{{%segment outline}}|{{%course outline}}")
    replace(courses, course, session, segment, ch)
    assert ch.content == f"{segment.outline()}|{course.schedule()}"


def test_named_course_outline(structure):
    courses, course, _, _ = structure
    ch = make_chapter("C", "c.md", "{{%course outline Fundamentals}}")
    replace(courses, None, None, None, ch)
    assert ch.content == course.schedule()


def test_named_course_missing(structure):
    courses = structure[0]
    ch = make_chapter("C", "c.md", "{{%course outline Missing}}")
    replace(courses, None, None, None, ch)
    assert ch.content == "not found - {{%course outline Missing}}"


def test_unknown_or_unavailable_directive_is_unwrapped(structure):
    courses = structure[0]
    ch = make_chapter("C", "c.md", "{{% foo  bar }} {{%session outline}}")
    replace(courses, None, None, None, ch)
    assert ch.content == "foo  bar session outline"


def test_chapter_without_source_is_untouched(structure):
    courses, course, session, segment = structure
    ch = Chapter(name="Draft", content="{{%session outline}}")
    replace(courses, course, session, segment, ch)
    assert ch.content == "{{%session outline}}"