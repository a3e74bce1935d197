from pathlib import PurePosixPath

import pytest

from coursebook.book import Book, Chapter
from coursebook.course import Courses
from coursebook.markdown import duration
from coursebook.schedule import main, pr_summary, session_summary, timediff


def _chapter(name, content, path):
    return Chapter(
        name=name, content=content, path=PurePosixPath(path), source_path=PurePosixPath(path)
    )


def _courses(*chapters):
    courses, _ = Courses.extract_structure(Book(sections=list(chapters)))
    return courses


def _fundamentals():
    return _courses(
        _chapter(
            "Intro",
            "---\ncourse: Fundamentals\nsession: Day 1\ntarget_minutes: 60\nminutes: 20\n---\n",
            "intro.md",
        ),
        _chapter("Second", "---\nminutes: 25\n---\n", "second.md"),
    )


def test_timediff_within_slop_is_plain_duration():
    assert timediff(60, 60, 15) == duration(60)
    assert timediff(75, 60, 15) == duration(75)
    assert timediff(45, 60, 15) == duration(45)


def test_timediff_too_long():
    result = timediff(120, 60, 15)
    assert result.startswith(duration(120))
    assert "\u23f0" in result
    assert result.endswith("too long*)")


def test_timediff_too_short():
    result = timediff(30, 60, 15)
    assert result.startswith(f"{duration(30)}: (")
    assert result.endswith(" short)")


def test_session_summary_lists_segments():
    courses = _fundamentals()
    session = courses.find_course("Fundamentals").sessions[0]
    lines = session_summary(courses).splitlines()
    assert lines[0] == "### Fundamentals // Day 1"
    assert lines[1] == f"_{timediff(session.minutes(), session.target_minutes(), 15)}_"
    assert lines[2] == ""
    assert lines[3].startswith("* Intro - _")
    assert lines[4].startswith("* Second - _")
    assert lines[5] == ""


def test_pr_summary_lists_sessions():
    courses = _fundamentals()
    course = courses.find_course("Fundamentals")
    session = course.sessions[0]
    lines = pr_summary(courses).splitlines()
    assert lines[0] == "## Course Schedule"
    assert lines[2] == "### Fundamentals"
    assert lines[3] == f"_{timediff(course.minutes(), course.target_minutes(), 15)}_"
    assert lines[4] == f"* Day 1 - _{timediff(session.minutes(), session.target_minutes(), 5)}_"


def test_summaries_stop_at_untimed_course():
    courses = _courses(
        _chapter("Empty", "---\ncourse: Empty\nsession: Only\n---\n", "empty.md"),
        _chapter("Full", "---\ncourse: Full\nsession: Day 1\nminutes: 30\n---\n", "full.md"),
    )
    assert session_summary(courses) == ""
    assert len(pr_summary(courses).splitlines()) == 2


@pytest.fixture
def book_dir(tmp_path, monkeypatch):
    src = tmp_path / "src"
    src.mkdir()
    (src / "SUMMARY.md").write_text("# Summary\n\n- [Intro](intro.md)\n", encoding="utf-8")
    (src / "intro.md").write_text(
        "---\ncourse: Fundamentals\nsession: Day 1\nminutes: 20\n---\n# Intro\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_main_prints_session_summary(book_dir, capsys):
    assert main([]) == 0
    assert "### Fundamentals // Day 1" in capsys.readouterr().out


def test_main_prints_pr_summary(book_dir, capsys):
    assert main(["pr"]) == 0
    assert capsys.readouterr().out.startswith("## Course Schedule\n")


def test_main_rejects_unknown_command(book_dir):
    with pytest.raises(SystemExit):
        main(["bogus"])


def test_main_fails_without_book(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 1
    assert "Unable to extract course structure" in capsys.readouterr().err