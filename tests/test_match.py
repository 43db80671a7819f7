from pathlib import Path

from src.data.letterboxd import FeedEntry
from src.data.records import MovieRecord
from src.sync.match import find_matching_movie, titles_match


def entry(title="The Matrix", year=1999, letterboxd_id="the-matrix-1999"):
    return FeedEntry(
        title=title,
        year=year,
        rating=9.0,
        letterboxd_id=letterboxd_id,
        url=f"https://letterboxd.com/woogles/film/{letterboxd_id}/",
    )


def record(key, **fields):
    return MovieRecord(key=key, path=Path("/movies") / key, **fields)


def movies(*records):
    return {r.key: r for r in records}


def test_match_by_letterboxd_id_beats_title():
    by_title = record("a.md", title="The Matrix", year=1999)
    by_id = record("b.md", title="Something Else", letterboxd_id="the-matrix-1999")
    assert find_matching_movie(entry(), movies(by_title, by_id)) is by_id


def test_first_id_match_in_enumeration_order_wins():
    first = record("a.md", title="The Matrix", letterboxd_id="the-matrix-1999")
    second = record("b.md", title="The Matrix", letterboxd_id="the-matrix-1999")
    local = movies(first, second)
    assert find_matching_movie(entry(), local) is first
    assert find_matching_movie(entry(), local) is first


def test_title_match_ignores_case_and_whitespace():
    local = movies(record("m.md", title="  the MATRIX ", year=1999))
    assert find_matching_movie(entry(), local) is local["m.md"]


def test_title_match_requires_equal_years_when_both_present():
    local = movies(record("m.md", title="The Matrix", year=2021))
    assert find_matching_movie(entry(), local) is None


def test_title_match_missing_year_on_either_side():
    no_local_year = record("m.md", title="The Matrix")
    assert titles_match(no_local_year, entry())
    assert titles_match(record("n.md", title="The Matrix", year=1999), entry(year=None))


def test_title_match_skips_untitled_records():
    assert not titles_match(record("m.md"), entry())


def test_different_letterboxd_id_still_matches_on_title():
    local = movies(record("m.md", title="The Matrix", year=1999, letterboxd_id="matrix-old"))
    assert find_matching_movie(entry(), local) is local["m.md"]


def test_no_match():
    local = movies(record("m.md", title="Heat", year=1995, letterboxd_id="heat-1995"))
    assert find_matching_movie(entry(), local) is None
    assert find_matching_movie(entry(), {}) is None


def test_title_match_reads_loosely_typed_years():
    assert titles_match(record("m.md", title="The Matrix", year="1999"), entry())
    assert titles_match(record("m.md", title="The Matrix", year="TBD"), entry())
    assert not titles_match(record("m.md", title="The Matrix", year="2021"), entry())


def test_title_match_numeric_title():
    assert titles_match(record("m.md", title=1917, year=2019), entry(title="1917", year=2019))
