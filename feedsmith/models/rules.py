"""Pydantic models for field extraction rules.

Rules are built once when a configuration document is parsed and are
immutable afterwards.
"""

import functools
import re
from typing import Any

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, model_validator

from feedsmith.models.enums import ConditionAction, FilterResult, FilterScope, MatchType, SelectorSource, TextCase

BODY = 'body'


@functools.lru_cache(maxsize=1024)
def compile_expr(expr: str) -> re.Pattern:
    """Compile a rule expression with DOTALL so patterns span lines."""
    return re.compile(expr, re.DOTALL)


class FieldExclude(BaseModel):
    """A tag/class/id rule that suppresses matching nodes.

    Empty attributes do not constrain the match.

    Attributes:
        tag: Element name, e.g. 'div'
        class_name: CSS class the element must carry
        id: Element id

    """

    model_config = ConfigDict(frozen=True)

    tag: str = ''
    class_name: str = ''
    id: str = ''

    @classmethod
    def parse(cls, expr: str) -> 'FieldExclude':
        """Parse ``tag.class``, ``tag#id`` or a bare ``tag``."""
        expr = expr.strip()
        if '.' in expr:
            tag, class_name = expr.split('.', 1)
            return cls(tag=tag, class_name=class_name)
        if '#' in expr:
            tag, element_id = expr.split('#', 1)
            return cls(tag=tag, id=element_id)
        return cls(tag=expr)

    def matches(self, node: Tag) -> bool:
        """True if every non-empty axis of the rule matches the node."""
        if self.tag and self.tag != node.name:
            return False
        if self.class_name and self.class_name not in (node.get('class') or []):
            return False
        return not (self.id and self.id != node.get('id'))

    @staticmethod
    def apply(excludes: tuple['FieldExclude', ...] | list['FieldExclude'], node: Tag) -> bool:
        """True if any exclude in the list matches the node."""
        return any(exclude.matches(node) for exclude in excludes)


class FieldSelector(BaseModel):
    """One way of locating a field value.

    Attributes:
        field_name: Name of the field owning the selector
        source: Where the expression is evaluated
        expr: CSS selector, meta name, or channel/store key
        attribute: Attribute to read instead of the node text
        multiple: Collect every matching node instead of the first
        separator: Joins multiple node values; empty keeps them separate
        excludes: Rules for nodes to discard
        stop_expr: Pattern that truncates the text and halts selection
        size: Preferred width when reading a srcset
        background: Read the CSS background-image url

    """

    model_config = ConfigDict(frozen=True)

    field_name: str = ''
    source: SelectorSource = SelectorSource.PAGE
    expr: str
    attribute: str | None = None
    multiple: bool = False
    separator: str = ' '
    excludes: tuple[FieldExclude, ...] = ()
    stop_expr: str | None = None
    size: int | None = None
    background: bool = False

    @model_validator(mode='before')
    @classmethod
    def _default_multiple(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get('multiple') is None:
            data = {**data, 'multiple': data.get('field_name') == BODY}
        return data

    @property
    def stop_pattern(self) -> re.Pattern | None:
        """Compiled stop expression, if any."""
        return compile_expr(self.stop_expr) if self.stop_expr else None


class FieldExtractor(BaseModel):
    """Regex extraction applied to selected text.

    Attributes:
        expr: Pattern searched for in the text
        format: Output with $n back-references and ${property} values
        match: Render the first match only, or every match concatenated

    """

    model_config = ConfigDict(frozen=True)

    expr: str
    format: str = '$1'
    match: MatchType = MatchType.FIRST

    @property
    def pattern(self) -> re.Pattern:
        return compile_expr(self.expr)

    def apply(self, text: str, properties: dict[str, str] | None = None) -> str | None:
        """Render the format for the first match, or for every match joined.

        Args:
            text: Selected text
            properties: Values for ${name} placeholders in the format

        Returns:
            The rendered text, or None when nothing matched.

        """
        template = self.format
        for key, value in (properties or {}).items():
            template = template.replace(f'${{{key}}}', value)
        template = template.replace('\\', '\\\\')
        # $n beyond the group count refers to the whole match
        groups = self.pattern.groups

        def _group(m: re.Match) -> str:
            number = int(m.group(1))
            return f'\\g<{number if number <= groups else 0}>'

        template = re.sub(r'\$(\d+)', _group, template)

        if self.match == MatchType.ALL:
            matches = list(self.pattern.finditer(text))
            if not matches:
                return None
            return ''.join(m.expand(template) for m in matches)

        match = self.pattern.search(text)
        return match.expand(template) if match is not None else None


class FieldFilter(BaseModel):
    """Regex veto applied to a candidate value.

    Attributes:
        expr: Pattern the whole candidate must match
        scope: Evaluation context the filter is restricted to
        stop: Stop the field entirely instead of skipping the candidate

    """

    model_config = ConfigDict(frozen=True)

    expr: str
    scope: FilterScope = FilterScope.ALL
    stop: bool = False

    def applies(self, scope: FilterScope) -> bool:
        """True if the filter is active in the given scope."""
        return self.scope == FilterScope.ALL or self.scope == scope

    def matches(self, text: str) -> bool:
        return compile_expr(self.expr).fullmatch(text) is not None

    @staticmethod
    def apply(
        filters: tuple['FieldFilter', ...] | list['FieldFilter'],
        text: str,
        scope: FilterScope,
    ) -> FilterResult:
        """Run a filter list against a candidate.

        Filters are checked in list order. STOP dominates SKIP, which
        dominates NONE, and once STOP is reached it is never downgraded.

        Args:
            filters: Filters in declared order
            text: Candidate value
            scope: Scope of the current evaluation

        Returns:
            The dominant FilterResult.

        """
        result = FilterResult.NONE
        for field_filter in filters:
            if not field_filter.applies(scope) or not field_filter.expr:
                continue
            if field_filter.matches(text) and result != FilterResult.STOP:
                result = FilterResult.STOP if field_filter.stop else FilterResult.SKIP
        return result


class FieldCondition(BaseModel):
    """Accept or reject rule for candidate page URLs.

    Attributes:
        expr: Pattern the whole value must match
        action: Decision taken when it matches

    """

    model_config = ConfigDict(frozen=True)

    expr: str
    action: ConditionAction = ConditionAction.ACCEPT

    def matches(self, text: str) -> bool:
        return compile_expr(self.expr).fullmatch(text) is not None

    @staticmethod
    def accept(conditions: tuple['FieldCondition', ...] | list['FieldCondition'], text: str) -> bool:
        """Return the decision of the first matching condition, rejecting if none match."""
        for condition in conditions:
            if condition.matches(text):
                return condition.action == ConditionAction.ACCEPT
        return False


class ContentField(BaseModel):
    """Complete extraction plan for one field.

    Attributes:
        name: Field name, e.g. 'title'
        selectors: Selectors tried in order until one yields a value
        extractors: Regex rewrites applied in order
        filters: Skip/stop rules for candidate values
        date_patterns: Date patterns tried in order
        text_case: Case transform for the value
        remove_parameters: Strip the query string from URL values
        trailing_slash: Keep URL values ending with a slash
        base_path: Prefix for relative URL values
        optional: Don't warn when no selector matches
        generate: Value is synthesized rather than scraped

    """

    model_config = ConfigDict(frozen=True)

    name: str
    selectors: tuple[FieldSelector, ...] = ()
    extractors: tuple[FieldExtractor, ...] = ()
    filters: tuple[FieldFilter, ...] = ()
    date_patterns: tuple[str, ...] = ()
    text_case: TextCase = TextCase.NONE
    remove_parameters: bool = True
    trailing_slash: bool = False
    base_path: str | None = None
    optional: bool = False
    generate: bool = False

    def has_selectors(self) -> bool:
        """True if at least one selector is configured."""
        return len(self.selectors) > 0

    def has_date_patterns(self) -> bool:
        return len(self.date_patterns) > 0

    @property
    def date_pattern(self) -> str | None:
        """First configured date pattern."""
        return self.date_patterns[0] if self.date_patterns else None

