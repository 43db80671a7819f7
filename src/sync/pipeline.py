"""Sync Letterboxd diary ratings into local movie files."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from src.config import SyncConfig
from src.data.letterboxd import FeedEntry, get_letterboxd_movies
from src.data.records import MovieRecord, read_records, write_record
from src.sync.match import find_matching_movie
from src.sync.merge import create_movie_file, merge_entry


@dataclass
class SyncReport:
    """Counters for one sync run."""

    entries: int = 0
    local_records: int = 0
    matched: int = 0
    updated: int = 0
    created: int = 0
    linked: int = 0
    reviews: int = 0
    skipped: int = 0

    def summary(self) -> str:
        return "\n".join([
            "Sync Summary:",
            f"  Updated ratings: {self.updated}",
            f"  Created new movies: {self.created}",
            f"  Added letterboxdId: {self.linked}",
            f"  Updated reviews: {self.reviews}",
            f"  Skipped existing files: {self.skipped}",
        ])


class LetterboxdSync:
    """Fetch the diary feed, then update or create one movie file per entry.

    Entries are applied one at a time and each file is written as soon as it
    changes, so a failure part-way leaves earlier entries synced.
    """

    def __init__(self, config: SyncConfig):
        self.config = config

    def fetch_entries(self) -> Iterable[FeedEntry]:
        return get_letterboxd_movies(self.config.username, timeout=self.config.timeout)

    def apply_entry(
        self,
        entry: FeedEntry,
        local_movies: Mapping[str, MovieRecord],
        report: SyncReport,
    ) -> None:
        report.entries += 1
        record = find_matching_movie(entry, local_movies)

        if record is None:
            if create_movie_file(entry, self.config.movies_dir) is None:
                report.skipped += 1
            else:
                report.created += 1
            return

        report.matched += 1
        result = merge_entry(record, entry)
        write_record(record)

        if result.linked:
            report.linked += 1
            print(f"  Added letterboxdId to: {record.title}")
        if result.rating_changed:
            report.updated += 1
            print(f"  Updated rating for: {record.title} ({result.old_rating} -> {entry.rating})")
        if result.review_updated:
            report.reviews += 1
            print(f"  Updated review for: {record.title}")

    def run(self) -> SyncReport:
        print(f"Syncing Letterboxd ratings for user: {self.config.username}")

        print("Fetching Letterboxd RSS feed...")
        entries = self.fetch_entries()

        print("Reading local movie files...")
        local_movies = read_records(self.config.movies_dir)
        print(f"Found {len(local_movies)} local movie files")

        report = SyncReport(local_records=len(local_movies))
        for entry in entries:
            self.apply_entry(entry, local_movies, report)
        print(f"Processed {report.entries} rated films from Letterboxd")

        return report


def sync_letterboxd(config: SyncConfig | None = None) -> SyncReport:
    return LetterboxdSync(config or SyncConfig.from_env()).run()
