"""Extract exercise files from code blocks marked with a file comment."""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
from pathlib import Path
from typing import IO, Any, Sequence

from markdown_it import MarkdownIt

from coursebook.book import Book

log = logging.getLogger(__name__)

FILENAME_START = "<!-- File "
FILENAME_END = " -->"

_CODE_BLOCKS = ("fence", "code_block")


def _filename(html_line: str) -> str | None:
    line = html_line.strip()
    if line.startswith(FILENAME_START) and line.endswith(FILENAME_END):
        return line[len(FILENAME_START): len(line) - len(FILENAME_END)]
    return None


def process(output_directory: str | Path, input_contents: str) -> None:
    """Write each code block preceded by a ``<!-- File name -->`` comment to that file.

    Code blocks without such a comment are ignored, and so are comments that
    no code block follows.
    """
    output_directory = Path(output_directory)
    next_filename: str | None = None
    for token in MarkdownIt("commonmark").parse(input_contents):
        log.debug("%s", token.type)
        if token.type == "html_block":
            for line in token.content.splitlines():
                name = _filename(line)
                if name is not None:
                    next_filename = name
                    log.info("Next file: %r", next_filename)
        elif token.type in _CODE_BLOCKS:
            if next_filename is None:
                continue
            full_filename = output_directory / next_filename
            log.info("Writing %s", full_filename)
            full_filename.parent.mkdir(parents=True, exist_ok=True)
            full_filename.write_text(token.content, encoding="utf-8", newline="")
            next_filename = None


def process_all(book: Book, output_directory: str | Path) -> None:
    """Extract exercises from every chapter into a directory named after its file."""
    output_directory = Path(output_directory)
    for chapter in book.chapters():
        log.debug("Chapter %s / %s", chapter.path, chapter.source_path)
        if chapter.path is None:
            continue
        stem = chapter.path.stem
        if not stem:
            raise ValueError(f"Chapter {str(chapter.path)!r} has no file stem")
        process(output_directory / stem, chapter.content)


def _output_directory(context: dict[str, Any]) -> Path:
    config = context.get("config")
    output = config.get("output") if isinstance(config, dict) else None
    renderer = output.get("exerciser") if isinstance(output, dict) else None
    if not isinstance(renderer, dict):
        raise ValueError("Missing output.exerciser configuration")
    if "output-directory" not in renderer:
        raise ValueError("Missing output.exerciser.output-directory configuration value")
    value = renderer["output-directory"]
    if not isinstance(value, str):
        raise ValueError("Expected a string for output.exerciser.output-directory")
    return Path(value)


def _render(stdin: IO[str]) -> None:
    try:
        context = json.load(stdin)
        if not isinstance(context, dict):
            raise ValueError("expected a JSON object")
        book = Book.from_dict(context.get("book"))
    except ValueError as exc:
        raise ValueError(f"Parsing stdin: {exc}") from exc

    output_directory = _output_directory(context)
    shutil.rmtree(output_directory, ignore_errors=True)
    try:
        output_directory.mkdir()
    except OSError as exc:
        raise OSError(
            f"Failed to create output directory {str(output_directory)!r}: {exc}"
        ) from exc
    process_all(book, output_directory)


def main(argv: Sequence[str] | None = None) -> int:
    """Run as a book renderer, reading the render context from standard input."""
    logging.basicConfig()
    argparse.ArgumentParser(
        prog="mdbook-exerciser", description="Extract exercise files from a book"
    ).parse_args(argv)
    try:
        _render(sys.stdin)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0