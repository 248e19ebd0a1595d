"""Utility functions for reading and saving feed spreadsheets."""

from pathlib import Path

from feedsmith.outputs.csv_output import read_csv, write_csv
from feedsmith.outputs.xlsx_output import read_xlsx, write_xlsx
from feedsmith.utils.files import atomic_write

FORMATS = ('.csv', '.xlsx')


def get_format(path: Path) -> str:
    """Return the spreadsheet format of a path from its suffix.

    Raises:
        ValueError: If the suffix is not a supported format

    """
    suffix = path.suffix.lower()
    if suffix not in FORMATS:
        raise ValueError(f'Unknown spreadsheet format: {suffix or path.name}. Choose from: {list(FORMATS)}')
    return suffix


def save_rows(path: Path, rows: list[list[str]], sheet: str = 'Sheet1') -> Path:
    """Save rows in the format given by the file suffix.

    The file is written to a temporary sibling and renamed into place.

    Args:
        path: Destination file (.csv or .xlsx)
        rows: Header row followed by data rows
        sheet: Worksheet name for workbook formats. Defaults to 'Sheet1'.

    Returns:
        Path to the saved file.

    """
    if get_format(path) == '.xlsx':
        return atomic_write(path, lambda tmp: write_xlsx(tmp, rows, sheet))
    return atomic_write(path, lambda tmp: write_csv(tmp, rows))


def load_rows(path: Path, sheet: str = 'Sheet1') -> list[list[str]]:
    """Load rows in the format given by the file suffix."""
    if get_format(path) == '.xlsx':
        return read_xlsx(path, sheet)
    return read_csv(path)
