"""Spreadsheet formats for feed files."""

from feedsmith.outputs.utils import get_format, load_rows, save_rows

__all__ = ['get_format', 'load_rows', 'save_rows']
