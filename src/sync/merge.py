"""Apply feed entries to local movie files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from src.config import PLACEHOLDER_BODY, RECORD_EXTENSION
from src.data.letterboxd import FeedEntry
from src.data.records import MovieRecord, write_record

NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class MergeResult:
    """What changed when a feed entry was merged into an existing file."""

    old_rating: float | None
    rating_changed: bool
    linked: bool
    review_updated: bool


def slugify(title: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to "-", trim the ends."""
    return NON_ALNUM_RE.sub("-", title.lower()).strip("-")


def record_filename(title: str, year: int | None, letterboxd_id: str | None = None) -> str:
    """File name for a new movie, e.g. ("The Matrix", 1999) -> "the-matrix-1999.md".

    Titles with no ASCII letters or digits fall back to the Letterboxd id,
    which is already unique, so no year is appended to it.
    """
    slug = slugify(title)
    if not slug:
        fallback = slugify(letterboxd_id or "")
        print(f"Warning: title {title!r} has no usable characters for a file name, using {fallback!r}")
        if not fallback:
            raise ValueError(f"cannot build a file name for {title!r}")
        return f"{fallback}{RECORD_EXTENSION}"
    if year:
        slug = f"{slug}-{year}"
    return f"{slug}{RECORD_EXTENSION}"


def has_placeholder_body(record: MovieRecord) -> bool:
    body = record.body.strip()
    return not body or body.lower() == PLACEHOLDER_BODY


def merge_entry(record: MovieRecord, entry: FeedEntry) -> MergeResult:
    """Update a matched record in place from a feed entry.

    The feed always wins on rating. The Letterboxd id and link are only
    filled in when missing, and the review only replaces an empty or
    placeholder body. Every other front matter key is left alone.
    """
    old_rating = record.rating
    linked = not record.letterboxd_id
    review_updated = bool(entry.note) and has_placeholder_body(record)

    record.rating = entry.rating
    if linked:
        record.letterboxd_id = entry.letterboxd_id
    if not record.link:
        record.link = entry.url
    if review_updated:
        record.body = entry.note.strip()

    return MergeResult(
        old_rating=old_rating,
        rating_changed=old_rating != entry.rating,
        linked=linked,
        review_updated=review_updated,
    )


def new_record(entry: FeedEntry, movies_dir: Path) -> MovieRecord:
    """Build (but don't write) the file for a feed entry with no local match."""
    filename = record_filename(entry.title, entry.year, entry.letterboxd_id)
    record = MovieRecord(key=filename, path=Path(movies_dir) / filename, title=entry.title, year=entry.year)
    merge_entry(record, entry)
    return record


def create_movie_file(entry: FeedEntry, movies_dir: Path) -> MovieRecord | None:
    """Write a new movie file for an unmatched entry.

    Returns None without writing when a file with the same name already
    exists.
    """
    record = new_record(entry, movies_dir)
    if record.path.exists():
        print(f"  File already exists: {record.key}, skipping creation")
        return None

    write_record(record)
    print(f"  Created new file: {record.key}")
    return record
