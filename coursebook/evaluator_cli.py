"""Command line for measuring rendered slides against a size policy."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Sequence

from coursebook.evaluator import Evaluator, SlidePolicy, WebDriverClient, WebDriverError
from coursebook.slides import SlideBook

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the slide evaluator."""
    parser = argparse.ArgumentParser(
        prog="mdbook-slide-evaluator",
        description="Evaluate the rendered size of book slides",
    )
    parser.add_argument("--webdriver", default="http://localhost:4444",
                        help="the URI of the webdriver")
    parser.add_argument("--element", default='//*[@id="content"]/main',
                        help="the XPath to element that is evaluated")
    parser.add_argument("-s", "--screenshot-dir", type=Path, default=None,
                        help="take screenshots of the content element if provided")
    parser.add_argument("--base-url", default="file:///",
                        help="a base url that is used to render the files")
    parser.add_argument("--export", type=Path, default=None,
                        help="exports to csv file if provided, otherwise to stdout")
    parser.add_argument("--overwrite", action="store_true",
                        help="allows overwriting the export file")
    parser.add_argument("--webclient-width", type=int, default=1920,
                        help="the width of the webclient that renders the slide")
    parser.add_argument("--webclient-height", type=int, default=1080,
                        help="the height of the webclient that renders the slide")
    parser.add_argument("--width", type=int, default=750, help="max width of a slide")
    parser.add_argument("--height", type=int, default=1333, help="max height of a slide")
    parser.add_argument("--violations-only", action="store_true",
                        help="if set only violating slides are shown")
    parser.add_argument("source_dir", type=Path,
                        help="directory of the book that is evaluated")
    return parser


def _install_interrupt_handler(cancel: threading.Event) -> Any:
    def handler(signum: int, frame: object) -> None:
        log.info("received CTRL+C")
        cancel.set()

    try:
        return signal.signal(signal.SIGINT, handler)
    except ValueError:
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Evaluate every slide of a book and report the results."""
    logging.basicConfig()
    parser = build_parser()
    arguments = list(sys.argv[1:] if argv is None else argv)
    if not arguments:
        parser.print_help(sys.stderr)
        return 2
    args = parser.parse_args(arguments)

    try:
        book = SlideBook.from_html_slides(args.source_dir)
        client = WebDriverClient(args.webdriver)
    except (WebDriverError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    cancel = threading.Event()
    previous = _install_interrupt_handler(cancel)
    try:
        client.set_window_size(args.webclient_width, args.webclient_height)
        evaluator = Evaluator(
            client,
            args.element,
            args.screenshot_dir,
            args.base_url,
            args.source_dir,
            cancel,
            SlidePolicy(max_width=args.width, max_height=args.height),
        )
        results = evaluator.eval_book(book)
        if args.export is not None:
            results.export_csv(args.export, args.overwrite, args.violations_only)
        else:
            results.export_stdout(args.violations_only)
    except (WebDriverError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)
        log.debug("closing webclient")
        try:
            client.close()
        except WebDriverError as exc:
            log.warning("failed to close webclient: %s", exc)
    return 0