"""Enumerations shared by the rule model, configuration and deployment."""

from enum import Enum


class SelectorSource(str, Enum):
    """Where a selector reads its value from."""

    PAGE = 'page'
    META = 'meta'
    CHANNEL = 'channel'
    STORE = 'store'


class MatchType(str, Enum):
    """Whether an extractor rewrites the first match or every match."""

    FIRST = 'first'
    ALL = 'all'


class FilterScope(str, Enum):
    """Evaluation context a filter is restricted to."""

    ALL = 'all'
    TEASER = 'teaser'
    ARTICLE = 'article'
    SUMMARY = 'summary'


class FilterResult(int, Enum):
    """Outcome of running a filter list, ordered by dominance."""

    NONE = 0
    SKIP = 1
    STOP = 2


class TextCase(str, Enum):
    """Case transform applied to an extracted value."""

    NONE = 'none'
    UPPER = 'upper'
    LOWER = 'lower'
    SENTENCE = 'sentence'
    TITLE = 'title'


class ConditionAction(str, Enum):
    """What happens when a page condition matches."""

    ACCEPT = 'accept'
    REJECT = 'reject'


class ContentType(str, Enum):
    """Content types, valued by their key in configuration documents."""

    VIDEO = 'video'
    ROUNDUP = 'roundup'
    POST = 'post'
    EVENT = 'event'
    WHITE_PAPER = 'white-papers'
    EBOOK = 'ebooks'
    TOOL = 'tool'
    PROJECT = 'project'

    @property
    def env_key(self) -> str:
        """Suffix used for per-type environment variables."""
        return self.value.replace('-', '_').upper()


class ContentStatus(str, Enum):
    """Deployment status of a content item."""

    NEW = 'new'
    PENDING = 'pending'
    STAGED = 'staged'
    DEPLOYED = 'deployed'
    SKIPPED = 'skipped'


class EnvironmentName(str, Enum):
    """Named deployment targets."""

    STAGE = 'stage'
    PROD = 'prod'


def parse_enum(enum_type: type[Enum], value: str) -> Enum:
    """Look up an enum member by value or name, ignoring case.

    Args:
        enum_type: Enum class to search
        value: Raw configuration value

    Returns:
        The matching member

    Raises:
        ValueError: If no member matches

    """
    text = str(value).strip().lower()
    for member in enum_type:
        if text in (str(member.value).lower(), member.name.lower()):
            return member
    raise ValueError(f'Unknown {enum_type.__name__}: {value}. Choose from: {[m.value for m in enum_type]}')
