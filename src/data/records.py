"""Read and write movie content files (YAML front matter + markdown body)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.config import LETTERBOXD_ID_KEY, RECORD_EXTENSION

DELIMITER = "---"

# Front matter keys the sync understands; everything else belongs to the user
RECOGNIZED_KEYS = ("title", "year", "rating", LETTERBOXD_ID_KEY, "link")


class LocalReadError(Exception):
    """A movie file could not be read or its front matter is malformed."""


@dataclass
class MovieRecord:
    """A single movie content file.

    Recognized front matter keys are exposed as attributes; all other keys
    (poster, tags, director, featured, ...) live in ``extra``. ``title`` and
    ``year`` hold the file's values as written; use ``title_text`` and
    ``year_number`` to compare them. Everything the sync does not set is
    written back untouched, in its original order.
    """

    key: str
    path: Path
    title: Any = None
    year: Any = None
    rating: float | None = None
    letterboxd_id: str | None = None
    link: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    key_order: list[str] = field(default_factory=list)

    @classmethod
    def from_metadata(cls, path: Path, metadata: dict[str, Any], body: str) -> MovieRecord:
        extra = {k: v for k, v in metadata.items() if k not in RECOGNIZED_KEYS}
        return cls(
            key=path.name,
            path=path,
            title=metadata.get("title"),
            year=metadata.get("year"),
            rating=metadata.get("rating"),
            letterboxd_id=metadata.get(LETTERBOXD_ID_KEY) or None,
            link=metadata.get("link") or None,
            extra=extra,
            body=body,
            key_order=[str(k) for k in metadata],
        )

    @property
    def title_text(self) -> str | None:
        return str(self.title) if self.title is not None else None

    @property
    def year_number(self) -> int | None:
        return _as_int(self.year)

    def to_metadata(self) -> dict[str, Any]:
        """Front matter mapping, keeping the file's key order.

        Keys already in the file keep their position and value, null
        included. Recognized keys new to the file are appended at the end
        when they have a value.
        """
        managed = {
            "title": self.title,
            "year": self.year,
            "rating": self.rating,
            LETTERBOXD_ID_KEY: self.letterboxd_id,
            "link": self.link,
        }
        metadata: dict[str, Any] = {}
        for key in self.key_order:
            if key in managed:
                metadata[key] = managed[key]
            elif key in self.extra:
                metadata[key] = self.extra[key]
        for key, value in managed.items():
            if key not in metadata and value is not None:
                metadata[key] = value
        for key, value in self.extra.items():
            if key not in metadata:
                metadata[key] = value
        return metadata


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a content file into (front matter, body).

    Files without a leading ``---`` block have no front matter.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return {}, text

    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            raw = "".join(lines[1:i])
            body = "".join(lines[i + 1:])
            break
    else:
        raise LocalReadError("front matter block is not closed")

    try:
        metadata = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise LocalReadError(f"invalid front matter: {e}") from e

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise LocalReadError(f"front matter is a {type(metadata).__name__}, expected a mapping")

    # A single blank line between the block and the body is formatting
    if body.startswith("\n"):
        body = body[1:]
    return metadata, body


def render_front_matter(metadata: dict[str, Any], body: str) -> str:
    dumped = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True, default_flow_style=False)
    text = f"{DELIMITER}\n{dumped}{DELIMITER}\n"
    if body:
        text += body if body.endswith("\n") else body + "\n"
    return text


def read_record(path: Path) -> MovieRecord:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LocalReadError(f"{path.name}: {e}") from e
    try:
        metadata, body = split_front_matter(text)
    except LocalReadError as e:
        raise LocalReadError(f"{path.name}: {e}") from e
    return MovieRecord.from_metadata(path, metadata, body)


def read_records(movies_dir: Path) -> dict[str, MovieRecord]:
    """Read every movie file in a directory, keyed by filename.

    Files are visited in sorted filename order. Any failure (missing or
    unreadable directory, a malformed file) is reported and yields an empty
    mapping, so the run treats every feed entry as new.
    """
    movies: dict[str, MovieRecord] = {}
    try:
        paths = sorted(
            p for p in Path(movies_dir).iterdir()
            if p.is_file() and p.suffix == RECORD_EXTENSION
        )
        for path in paths:
            record = read_record(path)
            movies[record.key] = record
    except (OSError, LocalReadError) as e:
        print(f"Warning: could not read movie files in {movies_dir}: {e}")
        return {}
    return movies


def write_record(record: MovieRecord) -> None:
    record.path.parent.mkdir(parents=True, exist_ok=True)
    text = render_front_matter(record.to_metadata(), record.body)
    record.path.write_text(text, encoding="utf-8")
