"""Document context that field rules are evaluated against."""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class DocumentContext:
    """A fetched page plus the values extracted before it.

    Attributes:
        page: Parsed page, or the block of it being evaluated
        url: URL the page was fetched from
        base_path: Prefix for relative URLs on the page
        channel: Values already extracted from the channel/feed
        store: Values already held in the content store
        now: Evaluation time used for ${current-*} format properties

    """

    page: BeautifulSoup | Tag | None = None
    url: str = ''
    base_path: str = ''
    channel: dict[str, str] = field(default_factory=dict)
    store: dict[str, str] = field(default_factory=dict)
    now: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_html(cls, html: str, url: str = '', base_path: str = '', **kwargs) -> 'DocumentContext':
        """Parse HTML with lxml and wrap it in a context."""
        return cls(page=BeautifulSoup(html, 'lxml'), url=url, base_path=base_path, **kwargs)

    def scoped(self, node: Tag) -> 'DocumentContext':
        """Return a context restricted to one block of the page."""
        return dataclasses.replace(self, page=node)

    @property
    def properties(self) -> dict[str, str]:
        """Values for the ${current-*} placeholders in extractor formats."""
        return {
            'current-day': self.now.strftime('%d'),
            'current-month': self.now.strftime('%m'),
            'current-month-name': self.now.strftime('%B'),
            'current-year': self.now.strftime('%Y'),
        }
