"""Book preprocessor that adds course timing notes and expands course directives."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import IO, Sequence

from coursebook.book import Chapter, parse_preprocessor_input
from coursebook.course import Courses
from coursebook.replacements import replace
from coursebook.timing_info import insert_timing_info


def preprocess(stdin: IO[str], stdout: IO[str]) -> None:
    """Read a book from ``stdin``, process every chapter and write it to ``stdout``."""
    _context, book = parse_preprocessor_input(stdin)
    courses, book = Courses.extract_structure(book)

    def visit(chapter: Chapter) -> None:
        found = courses.find_slide(chapter)
        if found is None:
            # Outside of a course only the directives are expanded.
            replace(courses, None, None, None, chapter)
            return
        course, session, segment, slide = found
        insert_timing_info(slide, chapter)
        replace(courses, course, session, segment, chapter)

    book.for_each_chapter(visit)
    json.dump(book.to_dict(), stdout, ensure_ascii=False)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdbook-course", description="mdbook preprocessor for course material"
    )
    commands = parser.add_subparsers(dest="command")
    supports = commands.add_parser("supports", help="Check whether a renderer is supported")
    supports.add_argument("renderer")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the preprocessor; every renderer is supported."""
    logging.basicConfig()
    args = _parser().parse_args(argv)
    if args.command == "supports":
        return 0
    try:
        preprocess(sys.stdin, sys.stdout)
    except (ValueError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0