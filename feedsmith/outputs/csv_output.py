"""CSV serialisation of feed rows."""

import csv
from pathlib import Path


def write_csv(path: Path, rows: list[list[str]]) -> None:
    """Write rows to a CSV file, quoting every cell.

    Args:
        path: File to write
        rows: Header row followed by data rows

    """
    with open(path, 'w', encoding='utf-8', newline='') as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator='\n')
        writer.writerows(rows)


def read_csv(path: Path) -> list[list[str]]:
    """Read every row of a CSV file, header included."""
    with open(path, encoding='utf-8', newline='') as f:
        return [row for row in csv.reader(f)]
