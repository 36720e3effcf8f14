"""Snapshot users.json and books.json into the backup directory"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console

from bookstore.app import BookstoreApp

console = Console()


def main() -> int:
    app = BookstoreApp()
    result = app.snapshot()

    for name, path in sorted(result.written.items()):
        console.print(f"[green][OK][/green] {name}: {path}")
    for name, error in sorted(result.failed.items()):
        console.print(f"[yellow][SKIPPED][/yellow] {name}: {error}")

    console.print(f"Backup timestamp: {result.timestamp}")
    return 0 if result.written else 1


if __name__ == "__main__":
    sys.exit(main())
