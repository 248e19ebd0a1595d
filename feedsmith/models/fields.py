"""Ordered field map used to assemble one feed record."""

from collections.abc import Iterable, Mapping
from typing import Protocol, Union, runtime_checkable

ID = 'id'
PUBDATE = 'pubdate'
CODE = 'code'
ORGANISATION = 'organisation'
TITLE = 'title'
SUMMARY = 'summary'
DESCRIPTION = 'description'
PUBLISHED_DATE = 'published-date'
START_DATE = 'start-date'
START_TIME = 'start-time'
END_DATE = 'end-date'
END_TIME = 'end-time'
TIMEZONE = 'timezone'
LOCATION = 'location'
URL = 'url'
IMAGE = 'image'
IMAGE_TEXT = 'image-text'
THUMBNAIL = 'thumbnail'
THUMBNAIL_TEXT = 'thumbnail-text'
LOGO = 'logo'
LOGO_TEXT = 'logo-text'
TRACKING = 'tracking'
PUBLISHED = 'published'
AUTHOR = 'author'
AUTHOR_LINK = 'author-link'
BODY = 'body'
TAGS = 'tags'


@runtime_checkable
class FieldSource(Protocol):
    """Anything that can contribute fields to a record."""

    def to_fields(self) -> 'Fields': ...


SourceLike = Union[FieldSource, Mapping[str, str | None], None]


class Fields(dict[str, str]):
    """Ordered string map with fill-if-empty merging.

    Insertion order is preserved, so the first source to provide a key
    decides its position as well as its value.
    """

    def add(self, *sources: SourceLike) -> 'Fields':
        """Fill keys that are absent or empty from each source in order.

        Sources are read-only. ``None`` sources are ignored, so optional
        context (a missing organisation, say) can be passed straight in.

        Returns:
            self, to allow chaining.

        """
        for source in sources:
            for key, value in _items(source):
                if value is None:
                    continue
                if not self.get(key):
                    self[key] = value
        return self

    def get_value(self, key: str, fallback: str = '') -> str:
        """Return the value for a key, or the fallback when absent or empty."""
        value = self.get(key)
        return value if value else fallback

    def is_set(self, key: str) -> bool:
        return bool(self.get(key))

    def to_fields(self) -> 'Fields':
        return self

    def copy(self) -> 'Fields':
        return Fields(self)


def _items(source: SourceLike) -> Iterable[tuple[str, str | None]]:
    if source is None:
        return ()
    if isinstance(source, Mapping):
        return source.items()
    return source.to_fields().items()


def merge(target: Fields, sources: Iterable[SourceLike]) -> Fields:
    """Merge sources into the target in order, most specific first.

    Args:
        target: Record being assembled, mutated in place
        sources: Field sources in priority order

    Returns:
        The target.

    """
    return target.add(*sources)
