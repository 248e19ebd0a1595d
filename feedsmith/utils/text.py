"""Text helpers for field values and feed rows."""

import re
from collections.abc import Mapping

from feedsmith.models.enums import TextCase

PLACEHOLDER_PATTERN = re.compile(r'\$\{([^}]+)\}')

# Replacements for common typographic characters when writing plain ASCII
ASCII_REPLACEMENTS = {
    8211: '-',
    8212: '-',
    8216: "'",
    8217: "'",
    8218: "'",
    8220: '"',
    8221: '"',
    8222: '"',
    8230: '...',
    8364: 'Euro',
}


def substitute(template: str, values: Mapping[str, str | None], keep_missing: bool = False) -> str:
    """Replace ``${key}`` placeholders in a template.

    Args:
        template: Template text
        values: Values by placeholder name
        keep_missing: Leave unknown placeholders untouched instead of blanking them

    Returns:
        The substituted text.

    """

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        value = values.get(key)
        if value is None:
            return match.group(0) if keep_missing else ''
        return str(value)

    return PLACEHOLDER_PATTERN.sub(_replace, template)


def change_case(text: str, text_case: TextCase) -> str:
    """Apply a case transform to a value."""
    if text_case == TextCase.UPPER:
        return text.upper()
    if text_case == TextCase.LOWER:
        return text.lower()
    if text_case == TextCase.TITLE:
        return re.sub(r'\S+', lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)
    if text_case == TextCase.SENTENCE:
        stripped = text.lstrip()
        lead = text[: len(text) - len(stripped)]
        return lead + stripped[:1].upper() + stripped[1:].lower()
    return text


def convert_to_ascii(text: str, html: bool = False, diacritics: bool = True) -> str:
    """Reduce a value to the characters the deployment feed accepts.

    Printable ASCII and newlines are kept. Other characters become numeric
    entities when ``html`` is set, otherwise typographic punctuation is
    replaced by ASCII equivalents. Latin-1 letters are kept, Latin Extended-A
    letters are kept when ``diacritics`` is set and become '?' otherwise.
    Everything else is dropped.

    Args:
        text: Value to convert
        html: Whether the column holds HTML markup
        diacritics: Whether accented Latin letters survive

    Returns:
        The converted value.

    """
    converted = []
    for char in text:
        code = ord(char)
        if 32 <= code <= 126 or char == '\n':
            converted.append(char)
        elif code >= 128:
            if html:
                converted.append(f'&#{code:04d};')
            elif code in ASCII_REPLACEMENTS:
                converted.append(ASCII_REPLACEMENTS[code])
            elif code <= 255:
                converted.append(char)
            elif code <= 383:
                converted.append(char if diacritics else '?')
    return ''.join(converted)


def is_relative_url(url: str) -> bool:
    """True if the URL has neither a scheme nor a protocol-relative prefix."""
    return not re.match(r'^([a-zA-Z][a-zA-Z0-9+.-]*:|//)', url)


def format_url(base_path: str | None, url: str | None, remove_parameters: bool = True) -> str:
    """Normalise a scraped URL.

    Args:
        base_path: Prefix for relative URLs
        url: URL as found on the page
        remove_parameters: Strip the query string and fragment

    Returns:
        The absolute, normalised URL (empty if no URL was given).

    """
    if url is not None:
        url = url.strip().replace(' ', '%20')
        if url.startswith('../'):
            url = url[2:]
        if remove_parameters:
            url = re.sub(r'[?#].*', '', url, flags=re.DOTALL)
        if len(url) > 3 and url.endswith('/'):
            url = url[:-1]

    formatted = ''
    if base_path and url is not None and is_relative_url(url):
        formatted = base_path.rstrip('/')
        if not url.startswith('/'):
            formatted += '/'

    if url is not None:
        if not formatted and url.startswith('//'):
            formatted = 'https:'
        formatted += url

    return formatted


def ensure_trailing_slash(url: str) -> str:
    """Append a slash to a non-empty URL that does not already end with one."""
    if url and not url.endswith('/'):
        return url + '/'
    return url


def generate_url(base_path: str | None, text: str) -> str:
    """Build a URL from a title-like text.

    The text is cut at the first ':' or ',', lowercased, and spaces and
    quotes are replaced by '-' before the base path is prefixed.

    Args:
        base_path: Prefix for the generated path
        text: Text the path is generated from, e.g. 'Weekly Roundup: June'

    Returns:
        The generated URL, e.g. '<base_path>/weekly-roundup'.

    """
    path = re.split(r'[:,]', text, maxsplit=1)[0].strip()
    path = re.sub("[ ‘'’]", '-', path.lower())
    return format_url(base_path, path, remove_parameters=False)
