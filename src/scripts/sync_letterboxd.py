"""Pre-build step: pull Letterboxd ratings into the movie content files."""

import sys

from src.config import SyncConfig
from src.data.letterboxd import FetchError, ParseError
from src.sync.pipeline import sync_letterboxd


def main():
    config = SyncConfig.from_env()
    try:
        report = sync_letterboxd(config)
    except (FetchError, ParseError) as e:
        print(f"Error during sync: {e}")
        sys.exit(1)

    print()
    print(report.summary())
    print("\nSync complete!")


if __name__ == "__main__":
    main()
