"""Utility components for feedsmith."""

from feedsmith.utils.dates import parse_date, parse_date_patterns, to_strptime
from feedsmith.utils.files import atomic_write, get_project_root, init_feedsmith
from feedsmith.utils.logging import configure_logfire, setup_local_logging
from feedsmith.utils.text import (
    change_case,
    convert_to_ascii,
    ensure_trailing_slash,
    format_url,
    generate_url,
    substitute,
)

__all__ = [
    'atomic_write',
    'change_case',
    'configure_logfire',
    'convert_to_ascii',
    'ensure_trailing_slash',
    'format_url',
    'generate_url',
    'get_project_root',
    'init_feedsmith',
    'parse_date',
    'parse_date_patterns',
    'setup_local_logging',
    'substitute',
    'to_strptime',
]
