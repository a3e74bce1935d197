"""YAML frontmatter carried at the top of a chapter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import yaml

_U64_MAX = 2**64 - 1

_FRONTMATTER = re.compile(
    r"\A\s*---[ \t]*\r?\n(?P<matter>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.S | re.M,
)


class FrontmatterError(ValueError):
    """Raised when a chapter's frontmatter cannot be understood."""


def _unsigned(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise FrontmatterError(f"{key}: expected a non-negative integer, got {value!r}")
    return value


def _string(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FrontmatterError(f"{key}: expected a string, got {value!r}")
    return value


@dataclass
class Frontmatter:
    """Course annotations from a chapter's frontmatter."""

    minutes: int | None = None
    target_minutes: int | None = None
    course: str | None = None
    session: str | None = None

    @classmethod
    def from_mapping(cls, data: Any) -> Frontmatter:
        """Validate parsed YAML and build a Frontmatter; unknown keys are ignored."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise FrontmatterError(f"expected a mapping, got {data!r}")
        return cls(
            minutes=_unsigned(data, "minutes"),
            target_minutes=_unsigned(data, "target_minutes"),
            course=_string(data, "course"),
            session=_string(data, "session"),
        )


def _matter(text: str) -> tuple[str, str] | None:
    match = _FRONTMATTER.match(text)
    if match is None:
        return None
    return match["matter"].strip(), text[match.end():].lstrip("\r\n")


def split_frontmatter(chapter: Any) -> tuple[Frontmatter, str]:
    """Split a chapter's content into its frontmatter and the remaining text."""
    found = _matter(chapter.content)
    if found is None:
        return Frontmatter(), chapter.content
    matter, content = found
    location = None if chapter.source_path is None else str(chapter.source_path)
    try:
        frontmatter = Frontmatter.from_mapping(yaml.safe_load(matter))
    except (yaml.YAMLError, FrontmatterError) as exc:
        raise FrontmatterError(f"error parsing frontmatter in {location!r}: {exc}") from exc
    return frontmatter, content