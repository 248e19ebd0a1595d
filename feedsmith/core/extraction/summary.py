"""Summary text derived from an extracted article body."""

import re
from collections.abc import Iterator, Sequence

from bs4 import BeautifulSoup

from feedsmith.models.config import SummaryConfig
from feedsmith.models.enums import FilterResult, FilterScope
from feedsmith.models.rules import FieldFilter

HEADING_TAGS = ('h1', 'h2', 'h3', 'h4', 'h5', 'h6')
TEXT_TAGS = ('p',)
SKIPPED_TAGS = ('blockquote', 'pre', 'ul', 'ol', 'table', 'figure', 'iframe', 'time')
URL_PATTERN = re.compile(r'(?:https?://|www\.)\S+', re.IGNORECASE)


def _body_elements(body: str) -> Iterator[tuple[bool, str]]:
    """Yield (is_heading, text) for the headings and paragraphs of a body, in order."""
    soup = BeautifulSoup(body, 'lxml')
    nodes = soup.find_all(HEADING_TAGS + TEXT_TAGS)
    if not nodes:
        text = soup.get_text(' ', strip=True)
        if text:
            yield False, text
        return

    for node in nodes:
        if node.find_parent(SKIPPED_TAGS) is not None:
            continue
        yield node.name in HEADING_TAGS, node.get_text(' ', strip=True)


def _non_url_text(text: str) -> str:
    """Keep only the sentences of a text that contain no URL."""
    sentences = [s for s in text.split('. ') if not URL_PATTERN.search(s)]
    return ' '.join(f'{s.rstrip(".")}.' for s in sentences)


def format_summary(body: str, config: SummaryConfig, filters: Sequence[FieldFilter] = ()) -> str:
    """Build a summary from the leading paragraphs of a body.

    Leading headings are skipped and the first heading after some text
    ends the summary. Quotes, code, lists, tables and figures are
    ignored. Paragraphs go through the SUMMARY scope filters, lose any
    sentence containing a URL and are appended until the summary is
    longer than ``min_length``. A paragraph that would take the summary
    past ``max_length`` (when set) ends it instead.

    Args:
        body: Body markup (or plain text)
        config: Summary length limits
        filters: Filters applied to each paragraph with the SUMMARY scope

    Returns:
        The summary, empty if no paragraph qualifies.

    """
    summary = ''
    leading_heading = None
    for is_heading, text in _body_elements(body):
        if is_heading:
            if leading_heading is None:
                leading_heading = True
            if leading_heading:
                continue
        else:
            leading_heading = False

        text = re.sub(r'\[.+\]', '', text)
        text = re.sub(r'_{2,}', '', text).strip()

        outcome = FieldFilter.apply(filters, text, FilterScope.SUMMARY)
        if outcome == FilterResult.SKIP:
            continue
        if outcome == FilterResult.STOP:
            break

        if URL_PATTERN.search(text):
            text = _non_url_text(text)
            if not text:
                continue

        if is_heading:
            break
        if not text or text.startswith(('#', '~', '_', '=')) or '▬' in text:
            continue
        if len(text) < config.min_paragraph:
            continue
        if summary and config.max_length > 0 and len(summary) + len(text) > config.max_length:
            break

        summary = f'{summary} {text}' if summary else text
        if len(summary) > config.min_length:
            break

    if summary.endswith(':'):
        summary = summary[:-1] + '.'
    return summary
