from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.config import SyncConfig

RSS_HEADER = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<rss version="2.0" xmlns:letterboxd="https://letterboxd.com" '
    'xmlns:dc="http://purl.org/dc/elements/1.1/">\n'
    "<channel>\n<title>Letterboxd - Woogles</title>\n"
)
RSS_FOOTER = "</channel>\n</rss>\n"


def make_item(
    title="The Matrix, 1999 - ★★★★★",
    link="https://letterboxd.com/woogles/film/the-matrix-1999/",
    film_title="The Matrix",
    film_year="1999",
    rating="5.0",
    watched_date="2025-10-04",
    description=None,
):
    """Build one RSS <item>; pass None to leave a field out."""
    parts = ["<item>"]
    if title is not None:
        parts.append(f"<title>{title}</title>")
    if link is not None:
        parts.append(f"<link>{link}</link>")
    parts.append("<pubDate>Sat, 4 Oct 2025 21:12:03 +1300</pubDate>")
    if watched_date is not None:
        parts.append(f"<letterboxd:watchedDate>{watched_date}</letterboxd:watchedDate>")
    if film_title is not None:
        parts.append(f"<letterboxd:filmTitle>{film_title}</letterboxd:filmTitle>")
    if film_year is not None:
        parts.append(f"<letterboxd:filmYear>{film_year}</letterboxd:filmYear>")
    if rating is not None:
        parts.append(f"<letterboxd:memberRating>{rating}</letterboxd:memberRating>")
    if description is not None:
        parts.append(f"<description><![CDATA[{description}]]></description>")
    parts.append("</item>")
    return "".join(parts)


def make_feed(*items):
    return (RSS_HEADER + "\n".join(items) + RSS_FOOTER).encode("utf-8")


def write_movie(movies_dir: Path, filename: str, text: str) -> Path:
    movies_dir.mkdir(parents=True, exist_ok=True)
    path = movies_dir / filename
    path.write_text(text, encoding="utf-8")
    return path


def feed_response(content: bytes, status_code: int = 200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    return resp


@pytest.fixture
def movies_dir(tmp_path):
    path = tmp_path / "movies"
    path.mkdir()
    return path


@pytest.fixture
def config(movies_dir):
    return SyncConfig(username="woogles", movies_dir=movies_dir, timeout=5)
