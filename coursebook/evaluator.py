"""Render slides in a browser over WebDriver and check their size against a policy."""

from __future__ import annotations

import base64
import csv
import enum
import logging
import math
import os
import threading
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any
from urllib.parse import urljoin

import httpx

from coursebook.slides import Slide, SlideBook

log = logging.getLogger(__name__)

_ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"
_USIZE_MAX = 2**64 - 1
_CSV_HEADER = ["filename", "element_width", "element_height", "policy_violations"]


def _as_usize(value: float) -> int:
    """Truncate a float to a non-negative integer, saturating at the bounds."""
    if math.isnan(value) or value <= 0:
        return 0
    if value >= _USIZE_MAX:
        return _USIZE_MAX
    return int(value)


def _round_half_away(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _display_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True)
class ElementSize:
    """Width and height of a rendered element."""

    width: float
    height: float


class PolicyViolation(enum.Enum):
    """Ways a slide can break the size policy."""

    MAX_WIDTH = "MaxWidth"
    MAX_HEIGHT = "MaxHeight"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SlidePolicy:
    """Maximum size a slide's content may take."""

    max_width: int
    max_height: int

    def _eval_width(self, element_size: ElementSize) -> PolicyViolation | None:
        if _as_usize(element_size.width) > self.max_width:
            return PolicyViolation.MAX_WIDTH
        return None

    def _eval_height(self, element_size: ElementSize) -> PolicyViolation | None:
        if _as_usize(element_size.height) > self.max_height:
            return PolicyViolation.MAX_HEIGHT
        return None

    def eval_size(self, element_size: ElementSize) -> list[PolicyViolation]:
        """Return every size violation, height first."""
        checks = (self._eval_height(element_size), self._eval_width(element_size))
        return [violation for violation in checks if violation is not None]


@dataclass
class EvaluationResult:
    """What was measured for one slide."""

    slide: Slide
    element_size: ElementSize
    policy_violations: list[PolicyViolation] = field(default_factory=list)

    def _violations_text(self) -> str:
        return ";".join(str(violation) for violation in self.policy_violations)


@dataclass
class EvaluationResults:
    """Results for all evaluated slides of a book."""

    book: SlideBook
    results: list[EvaluationResult] = field(default_factory=list)

    def _selected(self, violations_only: bool) -> list[EvaluationResult]:
        return [r for r in self.results if r.policy_violations or not violations_only]

    def export_csv(self, file: str | Path, overwrite: bool, violations_only: bool) -> None:
        """Write the results to a CSV file, refusing to replace one unless allowed."""
        file = Path(file)
        if file.exists() and not overwrite:
            raise FileExistsError(
                f"Not allowed to overwrite existing evaluation results at {file}"
            )
        with file.open("w", newline="", encoding="utf-8") as stream:
            writer = csv.writer(stream, lineterminator="\n")
            header_written = False
            for result in self._selected(violations_only):
                if not header_written:
                    writer.writerow(_CSV_HEADER)
                    header_written = True
                writer.writerow(
                    [
                        str(result.slide.filename),
                        _as_usize(_round_half_away(result.element_size.width)),
                        _as_usize(_round_half_away(result.element_size.height)),
                        result._violations_text(),
                    ]
                )

    def export_stdout(self, violations_only: bool) -> None:
        """Print one line per result to standard output."""
        for result in self._selected(violations_only):
            print(
                f"{result.slide.filename}: "
                f"{_display_float(result.element_size.width)}x"
                f"{_display_float(result.element_size.height)} "
                f"[{result._violations_text()}]"
            )


class WebDriverError(Exception):
    """An error reported by, or while talking to, a WebDriver server."""

    def __init__(self, error: str, message: str = "") -> None:
        super().__init__(f"{error}: {message}" if message else error)
        self.error = error
        self.message = message


class WebDriverClient:
    """A minimal W3C WebDriver client holding one browser session."""

    def __init__(self, webdriver_url: str, timeout: float = 30.0) -> None:
        self._http = httpx.Client(base_url=webdriver_url, timeout=timeout)
        try:
            value = self._request("POST", "/session", {"capabilities": {"alwaysMatch": {}}})
            session_id = value.get("sessionId") if isinstance(value, dict) else None
            if not session_id:
                raise WebDriverError("session not created", "no session id in response")
        except BaseException:
            self._http.close()
            raise
        self.session_id = str(session_id)

    def __enter__(self) -> WebDriverClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, payload: Any = None) -> Any:
        try:
            response = self._http.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            raise WebDriverError("connection error", str(exc)) from exc
        try:
            data = response.json()
        except ValueError:
            data = None
        value = data.get("value") if isinstance(data, dict) else None
        if response.is_error:
            if isinstance(value, dict):
                error = value.get("error") or f"HTTP {response.status_code}"
                message = str(value.get("message", ""))
            else:
                error, message = f"HTTP {response.status_code}", response.text
            raise WebDriverError(str(error), message)
        return value

    def _session_path(self, suffix: str) -> str:
        return f"/session/{self.session_id}{suffix}"

    def set_window_size(self, width: int, height: int) -> None:
        """Resize the browser window."""
        self._request(
            "POST", self._session_path("/window/rect"), {"width": width, "height": height}
        )

    def goto(self, url: str) -> None:
        """Navigate the browser to ``url``."""
        log.debug("open url in webclient: %s", url)
        self._request("POST", self._session_path("/url"), {"url": url})

    def find_element(self, xpath: str) -> str:
        """Return the id of the first element matching ``xpath``."""
        value = self._request(
            "POST", self._session_path("/element"), {"using": "xpath", "value": xpath}
        )
        if isinstance(value, dict):
            element_id = value.get(_ELEMENT_KEY) or value.get("ELEMENT")
            if element_id:
                return str(element_id)
        raise WebDriverError("invalid response", f"no element reference in {value!r}")

    def element_rect(self, element_id: str) -> ElementSize:
        """Return the rendered size of an element."""
        value = self._request("GET", self._session_path(f"/element/{element_id}/rect"))
        try:
            return ElementSize(width=float(value["width"]), height=float(value["height"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise WebDriverError("invalid response", f"bad element rect {value!r}") from exc

    def element_screenshot(self, element_id: str) -> bytes:
        """Return a PNG screenshot of an element."""
        value = self._request(
            "GET", self._session_path(f"/element/{element_id}/screenshot")
        )
        if not isinstance(value, str):
            raise WebDriverError("invalid response", "screenshot is not a string")
        try:
            return base64.b64decode(value, validate=True)
        except ValueError as exc:
            raise WebDriverError("invalid response", "screenshot is not base64") from exc

    def close(self) -> None:
        """End the browser session and release the connection."""
        try:
            self._request("DELETE", self._session_path(""))
        finally:
            self._http.close()


class Evaluator:
    """Renders slides, measures one element on each and applies a size policy."""

    def __init__(
        self,
        webclient: WebDriverClient,
        element_selector: str,
        screenshot_dir: str | Path | None,
        html_base_url: str,
        source_dir: str | Path,
        cancellation: threading.Event | None,
        slide_policy: SlidePolicy,
    ) -> None:
        self.webclient = webclient
        self.element_selector = element_selector
        self.screenshot_dir = None if screenshot_dir is None else Path(screenshot_dir)
        self.html_base_url = html_base_url
        self.source_dir = Path(source_dir)
        self.cancellation = cancellation if cancellation is not None else threading.Event()
        self.slide_policy = slide_policy

    def _content_element(self) -> str | None:
        try:
            return self.webclient.find_element(self.element_selector)
        except WebDriverError as exc:
            if exc.error == "no such element":
                return None
            raise

    def _store_screenshot(self, screenshot: bytes, filename: Path) -> None:
        assert self.screenshot_dir is not None
        relative = Path(filename).relative_to(self.source_dir)
        output = self.screenshot_dir / relative.with_suffix(".png")
        log.debug("write screenshot to %s", output)
        if not output.parent.exists():
            log.debug("creating %s", output.parent)
            output.parent.mkdir(parents=True, exist_ok=True)
        flags = os.O_WRONLY | os.O_CREAT | getattr(os, "O_BINARY", 0)
        with open(os.open(output, flags, 0o666), "wb") as stream:
            stream.write(screenshot)

    def eval_slide(self, slide: Slide) -> EvaluationResult | None:
        """Evaluate one slide; ``None`` when the page lacks the content element."""
        log.debug("evaluating %r", slide)
        url = urljoin(self.html_base_url, Path(slide.filename).as_posix())
        self.webclient.goto(url)

        element_id = self._content_element()
        if element_id is None:
            return None
        element_size = self.webclient.element_rect(element_id)
        if self.screenshot_dir is not None:
            screenshot = self.webclient.element_screenshot(element_id)
            self._store_screenshot(screenshot, Path(slide.filename))
        result = EvaluationResult(
            slide=slide,
            element_size=element_size,
            policy_violations=self.slide_policy.eval_size(element_size),
        )
        log.debug("information about element: %r", result)
        return result

    def eval_book(self, book: SlideBook) -> EvaluationResults:
        """Evaluate every slide of the book until done or cancelled."""
        results: list[EvaluationResult] = []
        log.debug("slide count: %d", len(book.slides))
        for slide in book.slides:
            if self.cancellation.is_set():
                log.debug("received cancel request, return already completed results")
                break
            result = self.eval_slide(slide)
            if result is None:
                log.warning("slide with no content - ignore: %r", slide)
                continue
            results.append(result)
        return EvaluationResults(book=book, results=results)