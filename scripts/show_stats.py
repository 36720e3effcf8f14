"""Print user and book statistics from the data files"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich import box
from rich.console import Console
from rich.table import Table

from bookstore.app import BookstoreApp

console = Console()


def main() -> int:
    stats = BookstoreApp().stats()

    summary = Table(title="Bookstore data", box=box.SIMPLE)
    summary.add_column("Collection")
    summary.add_column("Total", justify="right")
    summary.add_column("Latest")
    summary.add_row("users", str(stats["users"]["total"]), stats["users"]["lastRegistered"] or "-")
    summary.add_row("books", str(stats["books"]["total"]), stats["books"]["lastAdded"] or "-")
    console.print(summary)

    if stats["books"]["byGenre"]:
        genres = Table(title="Books by genre", box=box.SIMPLE)
        genres.add_column("Genre")
        genres.add_column("Count", justify="right")
        for genre, count in sorted(stats["books"]["byGenre"].items()):
            genres.add_row(str(genre), str(count))
        console.print(genres)
    return 0


if __name__ == "__main__":
    sys.exit(main())
