"""Expansion of ``{{%...}}`` directives in chapter content."""

from __future__ import annotations

import re

from coursebook.book import Chapter
from coursebook.course import Course, Courses, Segment, Session

_DIRECTIVE = re.compile(r"\{\{%([^}]*)\}\}")


def replace(
    courses: Courses,
    course: Course | None,
    session: Session | None,
    segment: Segment | None,
    chapter: Chapter,
) -> None:
    """Replace the supported directives in ``chapter`` with generated content."""
    if chapter.source_path is None:
        return

    def expand(match: re.Match[str]) -> str:
        directive = match[1].strip()
        match directive.split():
            case ["session", "outline"] if session is not None:
                return session.outline()
            case ["segment", "outline"] if segment is not None:
                return segment.outline()
            case ["course", "outline"] if course is not None:
                return course.schedule()
            case ["course", "outline", name]:
                found = courses.find_course(name)
                if found is None:
                    return f"not found - {match[0]}"
                return found.schedule()
            case _:
                return directive

    chapter.content = _DIRECTIVE.sub(expand, chapter.content)