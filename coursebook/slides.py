"""Rendered slides of a book, found as HTML files on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slide:
    """A single rendered page of the book."""

    filename: Path


@dataclass
class SlideBook:
    """A collection of slides rooted at a source directory."""

    source_dir: Path
    slides: list[Slide] = field(default_factory=list)

    @classmethod
    def from_html_slides(cls, source_dir: str | Path) -> SlideBook:
        """Collect every ``.html`` file below ``source_dir``, in path order."""
        source_dir = Path(source_dir)
        slides: list[Slide] = []
        for filename in sorted(source_dir.glob("**/*.html")):
            slide = Slide(filename)
            log.debug("add %r", slide)
            slides.append(slide)
        return cls(source_dir=source_dir, slides=slides)