"""In-memory model of an mdBook book, its JSON form and its SUMMARY.md layout."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import IO, Any, Callable, Iterable, Iterator, Union


@dataclass
class Chapter:
    """A chapter of the book, possibly holding nested items."""

    name: str
    content: str = ""
    number: list[int] | None = None
    sub_items: list[BookItem] = field(default_factory=list)
    path: PurePosixPath | None = None
    source_path: PurePosixPath | None = None
    parent_names: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chapter:
        """Build a chapter from its JSON representation."""
        if not isinstance(data, dict):
            raise ValueError(f"malformed chapter: expected an object, got {data!r}")
        try:
            number = data.get("number")
            return cls(
                name=str(data["name"]),
                content=str(data.get("content") or ""),
                number=None if number is None else [int(n) for n in number],
                sub_items=[_item_from_data(item) for item in data.get("sub_items") or []],
                path=_optional_path(data.get("path")),
                source_path=_optional_path(data.get("source_path")),
                parent_names=[str(n) for n in data.get("parent_names") or []],
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"malformed chapter: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of this chapter."""
        return {
            "name": self.name,
            "content": self.content,
            "number": None if self.number is None else list(self.number),
            "sub_items": [_item_to_data(item) for item in self.sub_items],
            "path": None if self.path is None else str(self.path),
            "source_path": None if self.source_path is None else str(self.source_path),
            "parent_names": list(self.parent_names),
        }


@dataclass(frozen=True)
class Separator:
    """A horizontal separator between parts of the book."""


@dataclass(frozen=True)
class PartTitle:
    """A title introducing a part of the book."""

    title: str


BookItem = Union[Chapter, Separator, PartTitle]


def _optional_path(value: Any) -> PurePosixPath | None:
    return None if value is None else PurePosixPath(str(value))


def _item_from_data(data: Any) -> BookItem:
    if data == "Separator":
        return Separator()
    if isinstance(data, dict) and len(data) == 1:
        ((kind, value),) = data.items()
        if kind == "Chapter":
            return Chapter.from_dict(value)
        if kind == "PartTitle":
            return PartTitle(str(value))
    raise ValueError(f"unknown book item: {data!r}")


def _item_to_data(item: BookItem) -> Any:
    if isinstance(item, Chapter):
        return {"Chapter": item.to_dict()}
    if isinstance(item, PartTitle):
        return {"PartTitle": item.title}
    return "Separator"


def _walk(items: Iterable[BookItem]) -> Iterator[Chapter]:
    for item in items:
        if isinstance(item, Chapter):
            yield item
            yield from _walk(item.sub_items)


def _visit_post_order(items: Iterable[BookItem], func: Callable[[Chapter], None]) -> None:
    for item in items:
        if isinstance(item, Chapter):
            _visit_post_order(item.sub_items, func)
            func(item)


@dataclass
class Book:
    """A book: an ordered list of chapters, separators and part titles."""

    sections: list[BookItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        """Build a book from its JSON representation."""
        if not isinstance(data, dict) or not isinstance(data.get("sections"), list):
            raise ValueError("malformed book: expected an object with a 'sections' list")
        return cls(sections=[_item_from_data(item) for item in data["sections"]])

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of this book."""
        return {
            "sections": [_item_to_data(item) for item in self.sections],
            "__non_exhaustive": None,
        }

    def chapters(self) -> Iterator[Chapter]:
        """Yield every chapter, parents before their sub-chapters."""
        return _walk(self.sections)

    def for_each_chapter(self, func: Callable[[Chapter], None]) -> None:
        """Call ``func`` on every chapter, sub-chapters before their parent."""
        _visit_post_order(self.sections, func)

    @classmethod
    def load(cls, root: str | Path) -> Book:
        """Load a book from a directory holding ``book.toml`` and a source tree."""
        root = Path(root)
        src_dir = root / _source_directory(root / "book.toml")
        summary = (src_dir / "SUMMARY.md").read_text(encoding="utf-8")
        return cls(sections=_parse_summary(summary, src_dir))


_SRC_SETTING = re.compile(r'^\s*src\s*=\s*"(?P<src>[^"]*)"\s*$', re.M)


def _source_directory(book_toml: Path) -> str:
    if not book_toml.is_file():
        return "src"
    match = _SRC_SETTING.search(book_toml.read_text(encoding="utf-8"))
    return match["src"] if match else "src"


_SEPARATOR = re.compile(r"^[ \t]*(-{3,}|\*{3,}|_{3,})[ \t]*$")
_HEADING = re.compile(r"^#+[ \t]+(?P<title>.*?)[ \t#]*$")
_LIST_ITEM = re.compile(
    r"^(?P<indent>[ \t]*)[-*+][ \t]+\[(?P<name>[^\]]*)\]\((?P<link>[^)]*)\)"
)
_LINK = re.compile(r"^\[(?P<name>[^\]]*)\]\((?P<link>[^)]*)\)")


def _load_chapter(
    name: str,
    link: str,
    src_dir: Path,
    number: list[int] | None,
    parent_names: list[str],
) -> Chapter:
    link = link.strip()
    if not link:
        return Chapter(name=name, number=number, parent_names=parent_names)
    path = PurePosixPath(link)
    content = (src_dir / path).read_text(encoding="utf-8")
    return Chapter(
        name=name,
        content=content,
        number=number,
        path=path,
        source_path=path,
        parent_names=parent_names,
    )


def _parse_summary(text: str, src_dir: Path) -> list[BookItem]:
    sections: list[BookItem] = []
    stack: list[tuple[int, Chapter]] = []
    top_level_count = 0
    at_start = True

    for line in text.splitlines():
        if not line.strip():
            continue
        first_line, at_start = at_start, False

        if _SEPARATOR.match(line):
            sections.append(Separator())
            stack.clear()
        elif heading := _HEADING.match(line):
            if not first_line:
                sections.append(PartTitle(heading["title"]))
            stack.clear()
        elif item := _LIST_ITEM.match(line):
            indent = len(item["indent"].expandtabs(4))
            while stack and stack[-1][0] >= indent:
                stack.pop()
            if stack:
                parent = stack[-1][1]
                siblings = parent.sub_items
                position = 1 + sum(isinstance(s, Chapter) for s in siblings)
                number = [*(parent.number or []), position]
                parents = [*parent.parent_names, parent.name]
            else:
                top_level_count += 1
                siblings = sections
                number = [top_level_count]
                parents = []
            chapter = _load_chapter(item["name"], item["link"], src_dir, number, parents)
            siblings.append(chapter)
            stack.append((indent, chapter))
        elif link := _LINK.match(line.strip()):
            sections.append(_load_chapter(link["name"], link["link"], src_dir, None, []))
            stack.clear()

    return sections


def parse_preprocessor_input(stream: IO[str]) -> tuple[dict[str, Any], Book]:
    """Read the ``[context, book]`` JSON pair a preprocessor receives."""
    data = json.load(stream)
    if not isinstance(data, list) or len(data) != 2:
        raise ValueError("preprocessor input must be a JSON array of [context, book]")
    context, book = data
    if not isinstance(context, dict):
        raise ValueError("preprocessor context must be a JSON object")
    return context, Book.from_dict(book)