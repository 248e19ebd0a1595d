"""Typed parsing of raw configuration maps into the configuration tree.

Every block is parsed by its own function keyed on reserved string
constants. Unknown keys are ignored. Values of the wrong type raise
ConfigurationError naming the document and key.
"""

from enum import Enum
from typing import Any

from feedsmith.exceptions import ConfigurationError
from feedsmith.models.config import (
    FIELD_ROLES,
    ArticleConfig,
    ContentConfig,
    ContentFields,
    LoadingConfig,
    PageConfig,
    SummaryConfig,
)
from feedsmith.models.enums import (
    ConditionAction,
    ContentType,
    FilterScope,
    MatchType,
    SelectorSource,
    TextCase,
    parse_enum,
)
from feedsmith.models.rules import (
    ContentField,
    FieldCondition,
    FieldExclude,
    FieldExtractor,
    FieldFilter,
    FieldSelector,
)

# Page level keys of the legacy schema and their canonical block
LEGACY_PAGE_KEYS = {
    'teaser-fields': ('teasers', 'fields'),
    'teaser-loading': ('teasers', 'loading'),
    'article-fields': ('articles', 'fields'),
    'article-loading': ('articles', 'loading'),
}

# Keys that make a content type block describe a page by itself
PAGE_KEYS = ('url', 'teasers', 'articles', 'teaser-fields', 'article-fields')

TEXT_CASE_ALIASES = {'capitalize': TextCase.TITLE}


def _require_map(value: Any, source: str, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(source, key, f'expected a map, got {type(value).__name__}')
    return value


def _as_list(value: Any, source: str, key: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (str, dict)):
        return [value]
    raise ConfigurationError(source, key, f'expected a list, got {type(value).__name__}')


def _get_str(raw: dict[str, Any], key: str, source: str, default: str | None = None) -> str | None:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigurationError(source, key, f'expected a string, got {type(value).__name__}')
    return str(value)


def _get_bool(raw: dict[str, Any], key: str, source: str, default: bool | None = None) -> bool | None:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    raise ConfigurationError(source, key, f'expected a boolean, got {value!r}')


def _get_int(raw: dict[str, Any], key: str, source: str, default: int | None = None) -> int | None:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigurationError(source, key, f'expected an integer, got {value!r}')
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(source, key, f'expected an integer, got {value!r}') from e


def _get_enum(raw: dict[str, Any], key: str, source: str, enum_type: type[Enum], default: Any = None) -> Any:
    value = raw.get(key)
    if value is None:
        return default
    try:
        return parse_enum(enum_type, value)
    except ValueError as e:
        raise ConfigurationError(source, key, str(e)) from e


def _str_map(value: Any, source: str, key: str) -> dict[str, str]:
    raw = _require_map(value, source, key)
    return {str(k): '' if v is None else str(v) for k, v in raw.items()}


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def parse_selector(field_name: str, value: Any, source: str) -> FieldSelector:
    """Parse a selector; a plain string is the CSS expression."""
    if isinstance(value, str):
        return FieldSelector(field_name=field_name, expr=value)
    raw = _require_map(value, source, 'selector')
    expr = _get_str(raw, 'expr', source)
    if not expr:
        raise ConfigurationError(source, 'selector', f"selector for '{field_name}' has no expr")

    excludes = []
    for key in ('exclude', 'excludes'):
        for item in _as_list(raw.get(key), source, key):
            if not isinstance(item, str):
                raise ConfigurationError(source, key, f'expected a string, got {type(item).__name__}')
            excludes.append(FieldExclude.parse(item))

    return FieldSelector(
        **_drop_none(
            {
                'field_name': field_name,
                'source': _get_enum(raw, 'source', source, SelectorSource),
                'expr': expr,
                'attribute': _get_str(raw, 'attribute', source),
                'multiple': _get_bool(raw, 'multiple', source),
                'separator': _get_str(raw, 'separator', source),
                'excludes': tuple(excludes),
                'stop_expr': _get_str(raw, 'stop-expr', source),
                'size': _get_int(raw, 'size', source),
                'background': _get_bool(raw, 'background', source),
            }
        )
    )


def parse_extractor(value: Any, source: str) -> FieldExtractor:
    """Parse an extractor; a plain string is the pattern."""
    if isinstance(value, str):
        return FieldExtractor(expr=value)
    raw = _require_map(value, source, 'extractor')
    expr = _get_str(raw, 'expr', source)
    if not expr:
        raise ConfigurationError(source, 'extractor', 'extractor has no expr')
    return FieldExtractor(
        **_drop_none(
            {
                'expr': expr,
                'format': _get_str(raw, 'format', source),
                'match': _get_enum(raw, 'match', source, MatchType),
            }
        )
    )


def parse_filter(value: Any, source: str) -> FieldFilter:
    """Parse a filter; a plain string is the pattern."""
    if isinstance(value, str):
        return FieldFilter(expr=value)
    raw = _require_map(value, source, 'filter')
    return FieldFilter(
        **_drop_none(
            {
                'expr': _get_str(raw, 'expr', source, ''),
                'scope': _get_enum(raw, 'scope', source, FilterScope),
                'stop': _get_bool(raw, 'stop', source),
            }
        )
    )


def parse_condition(value: Any, source: str) -> FieldCondition:
    if isinstance(value, str):
        return FieldCondition(expr=value)
    raw = _require_map(value, source, 'condition')
    return FieldCondition(
        **_drop_none(
            {
                'expr': _get_str(raw, 'expr', source, ''),
                'action': _get_enum(raw, 'action', source, ConditionAction),
            }
        )
    )


def parse_text_case(raw: dict[str, Any], source: str) -> TextCase | None:
    value = raw.get('text-case')
    if isinstance(value, str) and value.lower() in TEXT_CASE_ALIASES:
        return TEXT_CASE_ALIASES[value.lower()]
    return _get_enum(raw, 'text-case', source, TextCase)


def parse_field(name: str, value: Any, source: str) -> ContentField:
    """Parse a field; a plain string is a single selector expression.

    Args:
        name: Field name (role)
        value: Raw field block
        source: Document name for error messages

    Returns:
        The parsed ContentField.

    """
    if isinstance(value, str):
        return ContentField(name=name, selectors=(parse_selector(name, value, source),))
    raw = _require_map(value, source, name)

    selectors = []
    for key in ('selector', 'selectors'):
        selectors.extend(parse_selector(name, item, source) for item in _as_list(raw.get(key), source, key))
    extractors = []
    for key in ('extractor', 'extractors'):
        extractors.extend(parse_extractor(item, source) for item in _as_list(raw.get(key), source, key))
    filters = []
    for key in ('filter', 'filters'):
        filters.extend(parse_filter(item, source) for item in _as_list(raw.get(key), source, key))
    date_patterns = []
    for key in ('date-pattern', 'date-patterns'):
        for item in _as_list(raw.get(key), source, key):
            if not isinstance(item, str):
                raise ConfigurationError(source, key, f'expected a string, got {type(item).__name__}')
            date_patterns.append(item)

    return ContentField(
        **_drop_none(
            {
                'name': name,
                'selectors': tuple(selectors),
                'extractors': tuple(extractors),
                'filters': tuple(filters),
                'date_patterns': tuple(date_patterns),
                'text_case': parse_text_case(raw, source),
                'remove_parameters': _get_bool(raw, 'remove-parameters', source),
                'trailing_slash': _get_bool(raw, 'trailing-slash', source),
                'base_path': _get_str(raw, 'base-path', source),
                'optional': _get_bool(raw, 'optional', source),
                'generate': _get_bool(raw, 'generate', source),
            }
        )
    )


def parse_content_fields(value: Any, source: str) -> ContentFields:
    """Parse one field bundle (root, validator and role fields)."""
    raw = _require_map(value, source, 'fields')
    validator = raw.get('validator')
    return ContentFields(
        root=_get_str(raw, 'root', source),
        validator=parse_field('validator', validator, source) if validator is not None else None,
        fields={role: parse_field(role, raw[role], source) for role in FIELD_ROLES if raw.get(role) is not None},
    )


def parse_loading(value: Any, source: str, base: LoadingConfig | None = None) -> LoadingConfig:
    raw = _require_map(value, source, 'loading')
    keywords = [str(k) for k in _as_list(raw.get('keywords'), source, 'keywords')] if 'keywords' in raw else None
    overrides = _drop_none(
        {
            'wait': _get_int(raw, 'wait', source),
            'selector': _get_str(raw, 'selector', source),
            'interval': _get_int(raw, 'interval', source),
            'max_wait': _get_int(raw, 'max-wait', source),
            'javascript': _get_bool(raw, 'javascript', source),
            'scroll': _get_bool(raw, 'scroll', source),
            'keywords': keywords,
            'anti_cache': _get_bool(raw, 'anti-cache', source),
            'remove_parameters': _get_bool(raw, 'remove-parameters', source),
        }
    )
    if base is None:
        return LoadingConfig(**overrides)
    return base.model_copy(update=overrides, deep=True)


def parse_article_config(value: Any, source: str, base: ArticleConfig | None = None) -> ArticleConfig:
    """Parse a teasers/articles block: loading settings plus a list of bundles."""
    raw = _require_map(value, source, 'articles')
    config = base.model_copy(deep=True) if base is not None else ArticleConfig()
    if 'loading' in raw:
        config.loading = parse_loading(raw['loading'], source, config.loading)
    if 'fields' in raw:
        config.fields = [parse_content_fields(item, source) for item in _as_list(raw['fields'], source, 'fields')]
    return config


def adapt_legacy_page(raw: dict[str, Any]) -> dict[str, Any]:
    """Rewrite legacy teaser-/article- keys into teasers/articles blocks.

    A canonical block already present in the document wins over the
    legacy keys for the same setting.

    Args:
        raw: Page block, possibly in the legacy form

    Returns:
        A new page block in the canonical form only.

    """
    if not any(key in raw for key in LEGACY_PAGE_KEYS):
        return raw

    adapted = {k: v for k, v in raw.items() if k not in LEGACY_PAGE_KEYS}
    for legacy_key, (block, setting) in LEGACY_PAGE_KEYS.items():
        if legacy_key not in raw:
            continue
        target = dict(adapted.get(block) or {})
        target.setdefault(setting, raw[legacy_key])
        adapted[block] = target
    return adapted


def parse_page(value: Any, source: str, base: PageConfig | None = None) -> PageConfig:
    """Parse a page block in either schema form."""
    raw = adapt_legacy_page(_require_map(value, source, 'pages'))
    page = base.model_copy(deep=True) if base is not None else PageConfig()

    for key, attr in (('name', 'name'), ('url', 'url'), ('browser', 'browser'), ('base-path', 'base_path')):
        text = _get_str(raw, key, source)
        if text is not None:
            setattr(page, attr, text)
    more_link = _get_str(raw, 'more-link', source)
    if more_link is not None:
        page.more_link = more_link
    if 'teasers' in raw:
        page.teasers = parse_article_config(raw['teasers'], source, page.teasers)
    if 'articles' in raw:
        page.articles = parse_article_config(raw['articles'], source, page.articles)
    if 'conditions' in raw:
        page.conditions = [parse_condition(item, source) for item in _as_list(raw['conditions'], source, 'conditions')]
    return page


def parse_summary(value: Any, source: str, base: SummaryConfig | None = None) -> SummaryConfig:
    raw = _require_map(value, source, 'summary')
    overrides = _drop_none(
        {
            'max_length': _get_int(raw, 'max-length', source),
            'min_length': _get_int(raw, 'min-length', source),
            'min_paragraph': _get_int(raw, 'min-paragraph', source),
        }
    )
    return (base or SummaryConfig()).model_copy(update=overrides)


def parse_content_config(
    content_type: ContentType,
    value: Any,
    source: str,
    base: ContentConfig | None = None,
) -> ContentConfig:
    """Parse a content type block, overlaying it on a base config.

    The base is deep-copied first and never modified. Only keys present in
    the block replace base values, except ``fields`` which is merged key
    by key.

    Args:
        content_type: Type the block configures
        value: Raw content type block
        source: Document name for error messages
        base: Defaults to overlay, if any

    Returns:
        A new ContentConfig.

    """
    raw = _require_map(value, source, content_type.value)
    config = base.copy_config() if base is not None else ContentConfig(content_type=content_type)
    config.content_type = content_type

    for key, attr in (
        ('name', 'name'),
        ('filename', 'filename'),
        ('sheet', 'sheet'),
        ('default-date-pattern', 'default_date_pattern'),
    ):
        text = _get_str(raw, key, source)
        if text is not None:
            setattr(config, attr, text)

    content_source = _get_enum(raw, 'source', source, SelectorSource)
    if content_source is not None:
        config.source = content_source
    trailing_slash = _get_bool(raw, 'trailing-slash', source)
    if trailing_slash is not None:
        config.trailing_slash = trailing_slash
    if 'summary' in raw:
        config.summary = parse_summary(raw['summary'], source, config.summary)
    if 'fields' in raw:
        config.fields.update(_str_map(raw['fields'], source, 'fields'))
    if 'output' in raw:
        config.output = _str_map(raw['output'], source, 'output')
    if 'html-fields' in raw:
        config.html_fields = [str(v) for v in _as_list(raw['html-fields'], source, 'html-fields')]

    pages = []
    if any(key in raw for key in PAGE_KEYS):
        base_page = config.pages[0] if config.pages else None
        pages.append(parse_page(raw, source, base_page))
    if 'pages' in raw:
        pages.extend(parse_page(item, source) for item in _as_list(raw['pages'], source, 'pages'))
    if pages:
        config.pages = pages

    return config
