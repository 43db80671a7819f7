"""Fetch and parse the Letterboxd diary RSS feed."""

from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup

from src.config import (
    LETTERBOXD_NAMESPACE,
    LETTERBOXD_RSS_URL_TEMPLATE,
    LETTERBOXD_TIMEOUT,
)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
                  "AppleWebKit/537.36 (KHTML, like Gecko) "
                  "Chrome/120.0.0.0 Safari/537.36",
}

NS = {"letterboxd": LETTERBOXD_NAMESPACE}

FILM_SLUG_RE = re.compile(r"/film/([^/?#]+)")
STARS_RE = re.compile(r"-\s*(★*½?)\s*$")  # trailing " - ★★★½"
WATCHED_ON_RE = re.compile(r"^Watched on \w+ \w+ \d{1,2}, \d{4}\.?$")

# Title clean-up, applied in order
TITLE_SUFFIXES = [
    re.compile(r"\s*-\s*[★½]+.*$"),   # " - ★★★★½"
    re.compile(r"\s*,\s*\d{4}.*$"),   # ", 1999"
    re.compile(r"\s*\(\d{4}\)\s*$"),  # " (1999)"
]

MAX_STARS = 5.0


class FetchError(Exception):
    """The feed could not be retrieved."""

    def __init__(self, status_code: int | None, reason: str):
        self.status_code = status_code
        self.reason = reason
        if status_code is None:
            super().__init__(f"Failed to fetch Letterboxd RSS: {reason}")
        else:
            super().__init__(f"Failed to fetch Letterboxd RSS: {status_code} {reason}")


class ParseError(Exception):
    """The feed document is not a readable RSS document."""


@dataclass(frozen=True)
class FeedEntry:
    """One diary entry from the feed, rating already on the 0-10 scale."""

    title: str
    year: int | None
    rating: float
    letterboxd_id: str
    url: str
    note: str | None = None
    watched_date: str | None = None


def fetch_rss(username: str, timeout: float = LETTERBOXD_TIMEOUT) -> bytes:
    """Fetch the raw RSS document for a Letterboxd user."""
    url = LETTERBOXD_RSS_URL_TEMPLATE.format(username=username)
    try:
        resp = requests.get(url, headers=HEADERS, timeout=timeout)
        resp.raise_for_status()
    except requests.HTTPError as e:
        if e.response is None:
            raise FetchError(None, str(e)) from e
        raise FetchError(e.response.status_code, e.response.reason or "") from e
    except requests.RequestException as e:
        raise FetchError(None, str(e)) from e
    return resp.content


def convert_rating(value: str | float | None) -> float | None:
    """Convert a 0-5 star rating to the 0-10 scale.

    Returns None for missing, non-numeric or out-of-range values.
    """
    if value is None:
        return None
    try:
        stars = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(stars) or stars < 0 or stars > MAX_STARS:
        return None
    return round(stars * 2, 1)


def stars_from_title(title: str) -> float | None:
    """Count rating glyphs in a feed title, e.g. "Heat, 1995 - ★★★★½" -> 4.5."""
    match = STARS_RE.search(title)
    if not match or not match.group(1):
        return None
    glyphs = match.group(1)
    stars = float(glyphs.count("★"))
    if glyphs.endswith("½"):
        stars += 0.5
    return stars


def extract_letterboxd_id(url: str) -> str | None:
    """Extract the film slug from a Letterboxd URL.

    "https://letterboxd.com/film/the-matrix-1999/" -> "the-matrix-1999"
    "https://letterboxd.com/woogles/film/the-matrix/" -> "the-matrix"
    """
    match = FILM_SLUG_RE.search(url or "")
    return match.group(1) if match else None


def clean_title(title: str) -> str:
    for pattern in TITLE_SUFFIXES:
        title = pattern.sub("", title)
    return title.strip()


def parse_description(html: str | None) -> str | None:
    """Pull the review text out of an item's HTML description.

    Paragraphs holding only the poster image are dropped. Entries logged
    without a review only carry a "Watched on ..." line, which is not a note.
    """
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    paragraphs = soup.find_all("p")
    if paragraphs:
        texts = [p.get_text().strip() for p in paragraphs]
    else:
        texts = [soup.get_text().strip()]
    texts = [t for t in texts if t and not WATCHED_ON_RE.match(t)]

    return "\n\n".join(texts) if texts else None


def _text(item: ET.Element, path: str) -> str | None:
    el = item.find(path, NS)
    if el is None or el.text is None:
        return None
    return el.text.strip()


def _parse_year(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_item(item: ET.Element) -> FeedEntry | None:
    """Normalize one <item>; returns None when title, id or rating is missing."""
    raw_title = _text(item, "title") or ""
    title = clean_title(_text(item, "letterboxd:filmTitle") or raw_title)
    year = _parse_year(_text(item, "letterboxd:filmYear"))
    link = _text(item, "link") or ""

    # An explicit memberRating always wins, even when it is unusable
    if item.find("letterboxd:memberRating", NS) is not None:
        rating = convert_rating(_text(item, "letterboxd:memberRating"))
    else:
        rating = convert_rating(stars_from_title(raw_title))

    letterboxd_id = extract_letterboxd_id(link)

    if not title or not letterboxd_id or rating is None:
        return None

    note = parse_description(_text(item, "description"))
    return FeedEntry(
        title=title,
        year=year,
        rating=rating,
        letterboxd_id=letterboxd_id,
        url=link,
        note=note,
        watched_date=_text(item, "letterboxd:watchedDate") or _text(item, "pubDate"),
    )


def _iter_entries(items: list[ET.Element]) -> Iterator[FeedEntry]:
    for item in items:
        entry = parse_item(item)
        if entry is not None:
            yield entry


def parse_rss(document: str | bytes) -> Iterator[FeedEntry]:
    """Parse a Letterboxd RSS document into feed entries.

    The whole document is parsed up front so malformed XML raises ParseError
    before any entry is produced; entries themselves are built lazily.
    Items missing a title, film slug or usable rating are skipped.
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise ParseError(f"Malformed Letterboxd RSS: {e}") from e

    channel = root if root.tag == "channel" else root.find("channel")
    if channel is None:
        raise ParseError(f"Letterboxd RSS has no <channel> (root is <{root.tag}>)")

    return _iter_entries(channel.findall("item"))


def get_letterboxd_movies(username: str, timeout: float = LETTERBOXD_TIMEOUT) -> Iterator[FeedEntry]:
    """Fetch and parse the diary feed for a user."""
    return parse_rss(fetch_rss(username, timeout=timeout))
