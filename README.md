# coursebook

Tools for books written with mdBook that are organised as training courses:

- **mdbook-course** – an mdBook preprocessor that reads course structure from
  chapter frontmatter, adds timing notes to speaker notes and expands outline
  directives.
- **course-schedule** – prints a Markdown summary of course timings.
- **course-content** – prints the raw Markdown of every slide, grouped by
  course, session and segment.
- **mdbook-exerciser** – an mdBook renderer that writes marked code blocks out
  as files.
- **mdbook-slide-evaluator** – renders HTML slides through a WebDriver server
  and reports slides that are too large.

## Installation

```
pip install .
```

## Describing a course

A book is split into courses, sessions, segments and slides. Each top-level
chapter in `SUMMARY.md` is a segment, and its sub-chapters are slides;
anything nested below a slide belongs to that slide. The structure comes from
YAML frontmatter at the top of chapters:

```markdown
---
course: Fundamentals
session: Day 1 Morning
target_minutes: 180
minutes: 5
---

# Welcome
```

- `course` starts a new course (`course: none` marks material outside any
  course). A chapter that sets `course` must also set `session`.
- `session` starts a new session in the current course.
- `target_minutes` adds to the session's planned length. A session without a
  declared target uses its actual length as the target.
- `minutes` is the time a slide takes to teach.

Sub-slides nested below a slide may not set `course` or `session`. Malformed
frontmatter raises `coursebook.frontmatter.FrontmatterError`; an invalid
course layout raises `coursebook.course.CourseError`.

Durations longer than five minutes are shown rounded up to the next five
minutes, and a session's length counts a 10-minute break between the segments
that take any time.

## The preprocessor

Add it to `book.toml`:

```toml
[preprocessor.course]
command = "mdbook-course"
```

It reads the `[context, book]` JSON from standard input and writes the
processed book as JSON to standard output. `mdbook-course supports RENDERER`
exits successfully for every renderer.

The preprocessor strips frontmatter, adds "This slide should take about N
minutes." to the speaker notes (`<details>`) of timed slides, and replaces
these directives:

| Directive | Replaced with |
| - | - |
| `{{%session outline}}` | a table of the current session's segments |
| `{{%segment outline}}` | a table of the current segment's slides |
| `{{%course outline}}` | the current course's schedule |
| `{{%course outline NAME}}` | the schedule of the course called NAME |

Any other directive is replaced by its own text.

## Schedules and content

Run these from the book's root directory:

```
course-schedule            # per-session summary
course-schedule sessions   # the same
course-schedule pr         # summary suitable for a pull request
course-content             # every slide's Markdown, in course order
```

The book is read from `SUMMARY.md` in the source directory named by the `src`
setting of `book.toml` (default `src`). `course-content` reads the slide files
from `src`.

## Extracting exercises

Configure the renderer in `book.toml`:

```toml
[output.exerciser]
output-directory = "comprehensive-exercises"
```

Then put a comment directly before a code block to name the file it is
written to:

````markdown
<!-- File src/main.rs -->

```rust
fn main() {}
```
````

The output directory is removed and created afresh on every run. Each
chapter's files land in a subdirectory named after the chapter file's stem.
Code blocks without such a comment are ignored.

## Evaluating slide sizes

With a WebDriver server running and the rendered book available to it:

```
mdbook-slide-evaluator --webdriver http://localhost:4444 book/html
```

Every `.html` file below the given directory is opened in turn. Options:

- `--element` – XPath of the element to measure (default `//*[@id="content"]/main`)
- `--width`, `--height` – the largest allowed slide size (default 750 × 1333)
- `--webclient-width`, `--webclient-height` – browser window size (default 1920 × 1080)
- `--base-url` – URL under which the source directory is served (default `file:///`)
- `-s`, `--screenshot-dir` – save a PNG of every measured element
- `--export FILE` – write a CSV file instead of printing; add `--overwrite` to replace one
- `--violations-only` – report only slides that break the size policy

Pressing Ctrl+C stops after the current slide and reports the results so far.

## Using it as a library

```python
from coursebook.book import Book
from coursebook.course import Courses
from coursebook.markdown import duration

courses, book = Courses.extract_structure(Book.load("."))
for course in courses:
    print(course.name, duration(course.minutes()))
    print(course.schedule())
```

`coursebook.evaluator` offers `WebDriverClient`, `Evaluator` and
`SlidePolicy` for measuring slides from Python.

## Limitations

- `Book.load` understands the common `SUMMARY.md` forms (prefix and suffix
  chapters, numbered nested lists, part headings, separators and draft
  chapters with empty links) and only the `src` setting of `book.toml`; it is
  not a full mdBook book loader and does not render HTML.
- The slide evaluator does not start a browser or WebDriver server; one must
  already be running.

## Running the tests

```
pip install ".[test]"
pytest
```