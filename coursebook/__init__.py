"""Course structure, schedules, exercise extraction and slide evaluation for mdBook books."""

__version__ = "0.1.0"
__all__ = [
    "book",
    "frontmatter",
    "markdown",
    "course",
    "timing_info",
    "replacements",
    "preprocessor",
    "schedule",
    "content",
    "exerciser",
    "slides",
    "evaluator",
    "evaluator_cli",
]