"""Dump the full text of every course, annotated with its structure."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from coursebook.book import Book
from coursebook.course import Courses


def render_content(courses: Courses, src_dir: str | Path) -> str:
    """Return the source text of every slide, preceded by structure headings."""
    src_dir = Path(src_dir)
    lines: list[str] = []
    for course in courses:
        lines.append(f"# COURSE: {course.name}")
        for session in course:
            lines.append(f"# SESSION: {session.name}")
            for segment in session:
                lines.append(f"# SEGMENT: {segment.name}")
                for slide in segment:
                    lines.append(f"# SLIDE: {slide.name}")
                    lines.extend(
                        (src_dir / path).read_text(encoding="utf-8")
                        for path in slide.source_paths
                    )
    return "".join(f"{line}\n" for line in lines)


def main(argv: Sequence[str] | None = None) -> int:
    """Print the content of the book in the current directory."""
    logging.basicConfig()
    argparse.ArgumentParser(
        prog="course-content", description="Print the content of every course"
    ).parse_args(argv)
    try:
        courses, _ = Courses.extract_structure(Book.load("."))
        text = render_content(courses, Path("src"))
    except (ValueError, OSError) as exc:
        print(f"Unable to read the course content: {exc}", file=sys.stderr)
        return 1
    print(text, end="")
    return 0