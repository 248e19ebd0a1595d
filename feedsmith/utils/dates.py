"""Date pattern handling for date-valued fields.

Configuration documents carry date patterns in the familiar
``dd MMM yyyy`` letter notation. They are translated to ``strptime``
directives once and cached.
"""

import functools
from datetime import datetime

from feedsmith.exceptions import DateParseError

DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'

_DIRECTIVES = {
    'y': lambda n: '%y' if n == 2 else '%Y',
    'M': lambda n: '%B' if n >= 4 else '%b' if n == 3 else '%m',
    'L': lambda n: '%B' if n >= 4 else '%b' if n == 3 else '%m',
    'd': lambda n: '%d',
    'E': lambda n: '%A' if n >= 4 else '%a',
    'H': lambda n: '%H',
    'h': lambda n: '%I',
    'm': lambda n: '%M',
    's': lambda n: '%S',
    'S': lambda n: '%f',
    'a': lambda n: '%p',
    'z': lambda n: '%Z',
    'Z': lambda n: '%z',
    'X': lambda n: '%z',
    'x': lambda n: '%z',
}


@functools.lru_cache(maxsize=256)
def to_strptime(pattern: str) -> str:
    """Translate a letter date pattern into a strptime format.

    Patterns already containing ``%`` directives are returned unchanged.
    Text in single quotes is literal and ``''`` is an escaped quote.

    Args:
        pattern: Date pattern such as ``MMMM d, yyyy``

    Returns:
        The equivalent strptime format.

    Raises:
        ValueError: If the pattern uses an unsupported letter

    """
    if '%' in pattern:
        return pattern

    result = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "'":
            if pattern[i + 1 : i + 2] == "'":
                result.append("'")
                i += 2
                continue
            # Quoted literal, where '' stands for a single quote
            i += 1
            literal = []
            while i < len(pattern):
                if pattern[i] == "'":
                    if pattern[i + 1 : i + 2] != "'":
                        i += 1
                        break
                    literal.append("'")
                    i += 2
                    continue
                literal.append(pattern[i])
                i += 1
            result.append(''.join(literal))
        elif char.isalpha():
            run = 1
            while i + run < len(pattern) and pattern[i + run] == char:
                run += 1
            if char not in _DIRECTIVES:
                raise ValueError(f"Unsupported date pattern letter '{char}' in '{pattern}'")
            result.append(_DIRECTIVES[char](run))
            i += run
        else:
            result.append(char)
            i += 1
    return ''.join(result)


def parse_date(value: str, pattern: str) -> datetime:
    """Parse a value with a single date pattern.

    Raises:
        ValueError: If the value does not match the pattern

    """
    return datetime.strptime(value.strip(), to_strptime(pattern))


def parse_date_patterns(field_name: str, value: str, patterns: list[str]) -> datetime:
    """Parse a value with each pattern in turn until one succeeds.

    Args:
        field_name: Field the value belongs to, for error reporting
        value: Text to parse
        patterns: Date patterns in priority order

    Returns:
        The parsed datetime.

    Raises:
        DateParseError: If every pattern fails

    """
    for pattern in patterns:
        try:
            return parse_date(value, pattern)
        except ValueError:
            continue
    raise DateParseError(field_name, value, list(patterns))


def format_datetime(value: datetime, pattern: str = '') -> str:
    """Render a datetime with a date pattern, or the way date fields are stored in records."""
    return value.strftime(to_strptime(pattern) if pattern else DATETIME_FORMAT)
