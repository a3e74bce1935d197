from pathlib import PurePosixPath

from coursebook.book import Chapter
from coursebook.course import Slide
from coursebook.timing_info import insert_timing_info


def make(minutes, paths, content="Text\n<details>\nNotes"):
    slide = Slide(name="S", minutes=minutes, source_paths=[PurePosixPath(p) for p in paths])
    ch = Chapter(name="S", content=content, source_path=PurePosixPath(paths[0]))
    return slide, ch


def test_inserts_plural_minutes():
    slide, ch = make(5, ["s.md"])
    insert_timing_info(slide, ch)
    assert ch.content == "Text\n<details>\nThis slide should take about 5 minutes. \nNotes"


def test_single_minute():
    slide, ch = make(1, ["s.md"])
    insert_timing_info(slide, ch)
    assert "should take about 1 minute. " in ch.content


def test_mentions_sub_slides():
    slide, ch = make(3, ["s.md", "s/x.md"])
    insert_timing_info(slide, ch)
    assert "This slide and its sub-slides should take about 3 minutes. " in ch.content


def test_no_details_no_change():
    slide, ch = make(5, ["s.md"], content="Plain")
    insert_timing_info(slide, ch)
    assert ch.content == "Plain"


def test_zero_minutes_no_change():
    slide, ch = make(0, ["s.md"])
    insert_timing_info(slide, ch)
    assert ch.content == "Text\n<details>\nNotes"


def test_sub_chapter_no_change():
    slide, _ = make(5, ["s.md", "s/x.md"])
    sub = Chapter(name="X", content="<details>", source_path=PurePosixPath("s/x.md"))
    insert_timing_info(slide, sub)
    assert sub.content == "<details>"