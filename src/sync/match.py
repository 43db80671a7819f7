"""Pair feed entries with local movie files."""

from __future__ import annotations

from collections.abc import Mapping

from src.data.letterboxd import FeedEntry
from src.data.records import MovieRecord


def _normalize_title(title: str | None) -> str:
    return (title or "").strip().lower()


def titles_match(record: MovieRecord, entry: FeedEntry) -> bool:
    """Same title (case/whitespace-insensitive) and compatible years.

    A missing year on either side does not block the match.
    """
    if not record.title_text or _normalize_title(record.title_text) != _normalize_title(entry.title):
        return False
    year = record.year_number
    return entry.year is None or year is None or year == entry.year


def find_matching_movie(
    entry: FeedEntry,
    local_movies: Mapping[str, MovieRecord],
) -> MovieRecord | None:
    """Find the local file for a feed entry.

    Tries the Letterboxd id first, then title + year. Either way the first
    file in ``local_movies`` iteration order wins.
    """
    for record in local_movies.values():
        if record.letterboxd_id and record.letterboxd_id == entry.letterboxd_id:
            return record

    for record in local_movies.values():
        if titles_match(record, entry):
            return record

    return None
