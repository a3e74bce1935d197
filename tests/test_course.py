from pathlib import PurePosixPath

import pytest

from coursebook.book import Book, Chapter, PartTitle, Separator
from coursebook.course import BREAK_DURATION, CourseError, Courses
from coursebook.markdown import duration


def chapter(name, path, body="Body", sub_items=(), **matter):
    lines = [f"{key}: {value}" for key, value in matter.items()]
    content = f"---\n{chr(10).join(lines)}\n---\n{body}" if lines else body
    return Chapter(
        name=name,
        content=content,
        sub_items=list(sub_items),
        path=PurePosixPath(path),
        source_path=PurePosixPath(path),
    )


def sample_book():
    deep = chapter("Deep", "a/b/deep.md", minutes=2)
    sub = chapter("Sub", "a/b.md", minutes=5, sub_items=[deep])
    intro = chapter("Intro", "intro.md", course="none")
    seg_a = chapter("Seg A", "a.md", course="Fundamentals", session="Day 1", minutes=10,
                    target_minutes=90, sub_items=[sub])
    seg_b = chapter("Seg B", "b.md", minutes=20)
    welcome = chapter("Welcome", "w.md", minutes=0)
    seg_c = chapter("Seg C", "c.md", session="Day 2", minutes=15)
    other = chapter("Other", "o.md", course="Android", session="Morning", minutes=30)
    return Book(sections=[intro, Separator(), seg_a, seg_b, welcome, PartTitle("P"), seg_c, other])


@pytest.fixture
def courses():
    result, _ = Courses.extract_structure(sample_book())
    return result


def test_courses_and_sessions_are_grouped(courses):
    assert [c.name for c in courses] == ["Fundamentals", "Android"]
    fundamentals = courses.find_course("Fundamentals")
    assert [s.name for s in fundamentals] == ["Day 1", "Day 2"]
    assert [seg.name for seg in fundamentals.sessions[0]] == ["Seg A", "Seg B", "Welcome"]


def test_frontmatter_is_stripped_from_book():
    _, book = Courses.extract_structure(sample_book())
    assert all(c.content == "Body" for c in book.chapters())


def test_sub_chapters_fold_into_slide(courses):
    seg_a = courses.find_course("Fundamentals").sessions[0].segments[0]
    assert [s.name for s in seg_a] == ["Seg A", "Sub"]
    sub_slide = seg_a.slides[1]
    assert sub_slide.minutes == 5 + 2
    assert sub_slide.source_paths == [PurePosixPath("a/b.md"), PurePosixPath("a/b/deep.md")]
    assert seg_a.minutes() == 10 + 5 + 2


def test_session_minutes_include_breaks_between_timed_segments(courses):
    day1 = courses.find_course("Fundamentals").sessions[0]
    segs = day1.segments
    assert day1.minutes() == segs[0].minutes() + segs[1].minutes() + BREAK_DURATION


def test_target_minutes_declared_or_actual(courses):
    day1, day2 = courses.find_course("Fundamentals").sessions
    assert day1.target_minutes() == 90
    assert day2.target_minutes() == day2.minutes()
    course = courses.find_course("Fundamentals")
    assert course.target_minutes() == 90 + day2.minutes()
    assert course.minutes() == day1.minutes() + day2.minutes()


def test_empty_session_takes_no_time():
    book = Book(sections=[chapter("Only", "x.md", course="C", session="S")])
    courses, _ = Courses.extract_structure(book)
    assert courses.find_course("C").sessions[0].minutes() == 0


def test_course_without_session_fails():
    book = Book(sections=[chapter("Bad", "bad.md", course="C")])
    with pytest.raises(CourseError, match="'session' must appear"):
        Courses.extract_structure(book)


def test_sub_slide_with_course_fails():
    nested = chapter("Nested", "s/n.md", course="X")
    sub = chapter("Sub", "s.md", sub_items=[nested])
    book = Book(sections=[chapter("Top", "t.md", course="C", session="S", sub_items=[sub])])
    with pytest.raises(CourseError, match="sub-slides may not have"):
        Courses.extract_structure(book)


def test_find_slide_and_sub_chapter(courses):
    book = sample_book()
    deep = book.sections[2].sub_items[0].sub_items[0]
    course, session, segment, slide = courses.find_slide(deep)
    assert (course.name, session.name, segment.name, slide.name) == (
        "Fundamentals", "Day 1", "Seg A", "Sub")
    assert slide.is_sub_chapter(deep)
    assert not slide.is_sub_chapter(book.sections[2].sub_items[0])


def test_find_slide_missing(courses):
    assert courses.find_slide(chapter("Intro", "intro.md")) is None
    assert courses.find_slide(Chapter(name="Draft")) is None
    assert courses.find_course("Missing") is None


def test_schedule_and_outlines(courses):
    course = courses.find_course("Fundamentals")
    schedule = course.schedule()
    assert schedule.startswith("Course schedule:\n * Day 1 (")
    assert "including breaks)" in schedule
    assert "| Segment | Duration |" in schedule
    assert "Welcome" not in schedule
    day1 = course.sessions[0]
    assert day1.outline().startswith(
        f"Including 10 minute breaks, this session should take about {duration(day1.minutes())}."
    )
    seg_a = day1.segments[0]
    outline = seg_a.outline()
    assert outline.startswith(f"This segment should take about {duration(seg_a.minutes())}.")
    assert "| Slide | Duration |" in outline
    assert "| Sub |" in outline