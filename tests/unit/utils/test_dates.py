from datetime import datetime

import pytest

from feedsmith.exceptions import DateParseError
from feedsmith.utils.dates import format_datetime, parse_date, parse_date_patterns, to_strptime


@pytest.mark.parametrize(
    'pattern,expected',
    [
        ('yyyy-MM-dd', '%Y-%m-%d'),
        ('MMM d, yyyy', '%b %d, %Y'),
        ('MMMM d, yyyy', '%B %d, %Y'),
        ('EEEE, dd MMMM yy', '%A, %d %B %y'),
        ("yyyy-MM-dd'T'HH:mm:ss", '%Y-%m-%dT%H:%M:%S'),
        ('h:mm a', '%I:%M %p'),
        ("d 'of' MMMM", '%d of %B'),
        ("hh 'o''clock'", "%I o'clock"),
        ('%d/%m/%Y', '%d/%m/%Y'),
    ],
)
def test_to_strptime(pattern, expected):
    assert to_strptime(pattern) == expected


def test_to_strptime_rejects_unknown_letters():
    with pytest.raises(ValueError):
        to_strptime('yyyy-QQ')


def test_parse_date():
    assert parse_date(' Mar 7, 2024 ', 'MMM d, yyyy') == datetime(2024, 3, 7)
    assert parse_date('2024-03-07T09:30:00', "yyyy-MM-dd'T'HH:mm:ss") == datetime(2024, 3, 7, 9, 30)


def test_parse_date_patterns_uses_first_that_parses():
    value = parse_date_patterns('published-date', '07/03/2024', ['yyyy-MM-dd', 'dd/MM/yyyy', 'MM/dd/yyyy'])

    assert value == datetime(2024, 3, 7)


def test_parse_date_patterns_exhausted():
    with pytest.raises(DateParseError) as exc_info:
        parse_date_patterns('start-date', 'next Tuesday', ['yyyy-MM-dd', 'MMM d, yyyy'])

    error = exc_info.value
    assert error.field_name == 'start-date'
    assert error.value == 'next Tuesday'
    assert error.patterns == ['yyyy-MM-dd', 'MMM d, yyyy']
    assert 'start-date' in str(error)


def test_format_datetime():
    assert format_datetime(datetime(2024, 3, 7, 9, 5, 1)) == '2024-03-07 09:05:01'


def test_format_datetime_with_pattern():
    assert format_datetime(datetime(2024, 3, 7, 9, 5), 'dd MMM yyyy') == '07 Mar 2024'
    assert format_datetime(datetime(2024, 3, 7, 9, 5), '%d/%m/%Y %H:%M') == '07/03/2024 09:05'
