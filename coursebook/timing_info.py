"""Timing hints added to a slide's speaker notes."""

from __future__ import annotations

from coursebook.book import Chapter
from coursebook.course import Slide


def insert_timing_info(slide: Slide, chapter: Chapter) -> None:
    """Put the slide's expected duration at the start of its speaker notes."""
    if slide.minutes <= 0 or slide.is_sub_chapter(chapter) or "<details>" not in chapter.content:
        return
    plural = "minute" if slide.minutes == 1 else "minutes"
    subslides = "and its sub-slides " if len(slide.source_paths) > 1 else ""
    message = f"This slide {subslides}should take about {slide.minutes} {plural}. "
    chapter.content = chapter.content.replace("<details>", f"<details>\n{message}")