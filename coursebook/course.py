"""The course hierarchy: courses, sessions, segments and slides.

The structure comes from the order of chapters in the book and the
frontmatter of each chapter. A top-level chapter with a ``course`` key starts
a new course, one with a ``session`` key starts a new session, and every
top-level chapter inside a session becomes a segment whose first slide is
that chapter. Sub-chapters of a segment are further slides, and anything
nested below a slide belongs to that slide.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Iterator

from coursebook.book import Book, Chapter
from coursebook.frontmatter import Frontmatter, split_frontmatter
from coursebook.markdown import Table, duration

BREAK_DURATION = 10
"""Minutes of break between segments of a session."""


class CourseError(ValueError):
    """Raised when the book's frontmatter does not describe a valid course."""


def _describe(path: PurePosixPath | None) -> str:
    return "None" if path is None else repr(str(path))


def _strip_frontmatter(chapter: Chapter) -> Frontmatter:
    frontmatter, content = split_frontmatter(chapter)
    chapter.content = content
    return frontmatter


@dataclass
class Slide:
    """A single topic, possibly spread over several chapters."""

    name: str
    minutes: int = 0
    source_paths: list[PurePosixPath] = field(default_factory=list)

    @classmethod
    def _from_chapter(cls, frontmatter: Frontmatter, chapter: Chapter) -> Slide:
        slide = cls(name=chapter.name)
        slide._add(frontmatter, chapter)
        return slide

    def _add(self, frontmatter: Frontmatter, chapter: Chapter) -> None:
        self.minutes += frontmatter.minutes or 0
        if chapter.source_path is not None:
            self.source_paths.append(chapter.source_path)

    def _add_sub_chapters(self, chapter: Chapter) -> None:
        for sub in chapter.sub_items:
            if not isinstance(sub, Chapter):
                continue
            frontmatter = _strip_frontmatter(sub)
            if frontmatter.course is not None or frontmatter.session is not None:
                raise CourseError(
                    f"{_describe(sub.path)}: sub-slides may not have 'course' or 'session' set"
                )
            self._add(frontmatter, sub)
            self._add_sub_chapters(sub)

    def is_sub_chapter(self, chapter: Chapter) -> bool:
        """Tell whether ``chapter`` is a nested chapter rather than the slide's own."""
        first = self.source_paths[0] if self.source_paths else None
        return chapter.source_path != first


@dataclass
class Segment:
    """A group of slides sharing a theme."""

    name: str
    slides: list[Slide] = field(default_factory=list)

    def _add_slide(self, frontmatter: Frontmatter, chapter: Chapter, recurse: bool) -> None:
        slide = Slide._from_chapter(frontmatter, chapter)
        if recurse:
            slide._add_sub_chapters(chapter)
        self.slides.append(slide)

    def minutes(self) -> int:
        """Total minutes of the slides in this segment."""
        return sum(slide.minutes for slide in self.slides)

    def outline(self) -> str:
        """Markdown outline listing the timed slides of this segment."""
        table = Table(["Slide", "Duration"])
        for slide in self.slides:
            if slide.minutes:
                table.add_row([slide.name, duration(slide.minutes)])
        return (
            f"This segment should take about {duration(self.minutes())}. "
            f"It contains:\n\n{table}"
        )

    def __iter__(self) -> Iterator[Slide]:
        return iter(self.slides)


@dataclass
class Session:
    """A block of instructional time made of segments."""

    name: str
    segments: list[Segment] = field(default_factory=list)
    declared_target_minutes: int = 0

    def _add_segment(self, frontmatter: Frontmatter, chapter: Chapter) -> None:
        segment = Segment(name=chapter.name)
        segment._add_slide(frontmatter, chapter, recurse=False)
        for sub in chapter.sub_items:
            if not isinstance(sub, Chapter):
                continue
            segment._add_slide(_strip_frontmatter(sub), sub, recurse=True)
        self.segments.append(segment)

    def minutes(self) -> int:
        """Total minutes of this session, including breaks between timed segments."""
        timed = [segment.minutes() for segment in self.segments if segment.minutes() > 0]
        if not timed:
            return 0
        return sum(timed) + (len(timed) - 1) * BREAK_DURATION

    def target_minutes(self) -> int:
        """Declared target duration, or the actual duration if none was declared."""
        return self.declared_target_minutes or self.minutes()

    def outline(self) -> str:
        """Markdown outline listing the timed segments of this session."""
        table = Table(["Segment", "Duration"])
        for segment in self.segments:
            if segment.minutes():
                table.add_row([segment.name, duration(segment.minutes())])
        return (
            f"Including {BREAK_DURATION} minute breaks, this session should take about "
            f"{duration(self.minutes())}. It contains:\n\n{table}"
        )

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)


@dataclass
class Course:
    """The unit of content students enrol in."""

    name: str
    sessions: list[Session] = field(default_factory=list)

    def _session(self, name: str) -> Session:
        for session in self.sessions:
            if session.name == name:
                return session
        session = Session(name=name)
        self.sessions.append(session)
        return session

    def minutes(self) -> int:
        """Sum of the session durations, breaks within sessions included."""
        return sum(session.minutes() for session in self.sessions)

    def target_minutes(self) -> int:
        """Sum of the session target durations."""
        return sum(session.target_minutes() for session in self.sessions)

    def schedule(self) -> str:
        """Markdown schedule of the sessions and their timed segments."""
        parts = ["Course schedule:\n"]
        for session in self.sessions:
            parts.append(
                f" * {session.name} ({duration(session.minutes())}, including breaks)\n\n"
            )
            table = Table(["Segment", "Duration"])
            for segment in session.segments:
                if segment.minutes():
                    table.add_row([segment.name, duration(segment.minutes())])
            parts.append(f"{table}\n\n")
        return "".join(parts)

    def __iter__(self) -> Iterator[Session]:
        return iter(self.sessions)


@dataclass
class Courses:
    """All courses found in a book; material outside any course is left out."""

    courses: list[Course] = field(default_factory=list)

    @classmethod
    def extract_structure(cls, book: Book) -> tuple[Courses, Book]:
        """Build the course structure, stripping frontmatter from the book's chapters."""
        courses = cls()
        course_name: str | None = None
        session_name: str | None = None

        for item in book.sections:
            if not isinstance(item, Chapter):
                continue
            frontmatter = _strip_frontmatter(item)

            if frontmatter.course is not None:
                session_name = None
                course_name = None if frontmatter.course == "none" else frontmatter.course
            if frontmatter.session is not None:
                session_name = frontmatter.session

            if course_name is not None and session_name is None:
                raise CourseError(
                    f"{_describe(item.path)}: 'session' must appear in frontmatter "
                    "when 'course' appears"
                )

            if course_name is not None and session_name is not None:
                session = courses._course(course_name)._session(session_name)
                session.declared_target_minutes += frontmatter.target_minutes or 0
                session._add_segment(frontmatter, item)

        return courses, book

    def _course(self, name: str) -> Course:
        found = self.find_course(name)
        if found is not None:
            return found
        course = Course(name=name)
        self.courses.append(course)
        return course

    def find_course(self, name: str) -> Course | None:
        """Return the course with this name, if any."""
        return next((course for course in self.courses if course.name == name), None)

    def find_slide(
        self, chapter: Chapter
    ) -> tuple[Course, Session, Segment, Slide] | None:
        """Locate the slide built from ``chapter`` and the path leading to it."""
        if chapter.source_path is None:
            return None
        for course in self.courses:
            for session in course:
                for segment in session:
                    for slide in segment:
                        if chapter.source_path in slide.source_paths:
                            return course, session, segment, slide
        return None

    def __iter__(self) -> Iterator[Course]:
        return iter(self.courses)