"""XLSX serialisation of feed rows."""

from pathlib import Path

from openpyxl import Workbook, load_workbook


def write_xlsx(path: Path, rows: list[list[str]], sheet: str = 'Sheet1') -> None:
    """Write rows to a single-sheet workbook.

    Args:
        path: File to write
        rows: Header row followed by data rows
        sheet: Worksheet name. Defaults to 'Sheet1'.

    """
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet
    for row in rows:
        worksheet.append(row)
    workbook.save(path)


def read_xlsx(path: Path, sheet: str = 'Sheet1') -> list[list[str]]:
    """Read every row of a worksheet as strings, falling back to the active sheet."""
    workbook = load_workbook(path, read_only=True)
    try:
        worksheet = workbook[sheet] if sheet in workbook.sheetnames else workbook.active
        return [['' if cell is None else str(cell) for cell in row] for row in worksheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
