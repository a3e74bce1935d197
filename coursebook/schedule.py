"""Summaries of the course schedule compared with its target durations."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from coursebook.book import Book
from coursebook.course import Courses
from coursebook.markdown import duration


def timediff(actual: int, target: int, slop: int) -> str:
    """Describe ``actual`` and how far it strays from ``target`` beyond ``slop``."""
    if actual > target + slop:
        return f"{duration(actual)} (\u23f0 *{duration(actual - target)} too long*)"
    if actual + slop < target:
        return f"{duration(actual)}: ({duration(target - actual)} short)"
    return duration(actual)


def _lines(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def session_summary(courses: Courses) -> str:
    """Markdown summary of every session and its segments.

    Stops at the first course that has no target duration.
    """
    lines: list[str] = []
    for course in courses:
        if course.target_minutes() == 0:
            break
        for session in course:
            lines.append(f"### {course.name} // {session.name}")
            lines.append(f"_{timediff(session.minutes(), session.target_minutes(), 15)}_")
            lines.append("")
            lines.extend(
                f"* {segment.name} - _{duration(segment.minutes())}_" for segment in session
            )
            lines.append("")
    return _lines(lines)


def pr_summary(courses: Courses) -> str:
    """Markdown summary of the course schedule suited to a pull request."""
    lines = [
        "## Course Schedule",
        "With this pull request applied, the course schedule is as follows:",
    ]
    for course in courses:
        if course.target_minutes() == 0:
            break
        lines.append(f"### {course.name}")
        lines.append(f"_{timediff(course.minutes(), course.target_minutes(), 15)}_")
        lines.extend(
            f"* {session.name} - _{timediff(session.minutes(), session.target_minutes(), 5)}_"
            for session in course
        )
    return _lines(lines)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="course-schedule", description="Summarise the course schedule"
    )
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("sessions", help="Show session summary (default)")
    commands.add_parser("pr", help="Show summary for a PR")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Print a schedule summary of the book in the current directory."""
    logging.basicConfig()
    args = _parser().parse_args(argv)
    try:
        courses, _ = Courses.extract_structure(Book.load("."))
    except (ValueError, OSError) as exc:
        print(f"Unable to extract course structure: {exc}", file=sys.stderr)
        return 1
    summary = pr_summary if args.command == "pr" else session_summary
    print(summary(courses), end="")
    return 0