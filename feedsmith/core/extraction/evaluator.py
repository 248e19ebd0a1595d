"""Evaluates field rules against fetched documents."""

import copy
import logging
import re
from typing import ClassVar

import logfire
from bs4 import Tag
from rich.console import Console

from feedsmith.core.extraction.document import DocumentContext
from feedsmith.core.extraction.summary import format_summary
from feedsmith.exceptions import DateParseError
from feedsmith.models.config import ContentConfig, ContentFields, PageConfig
from feedsmith.models.enums import FilterResult, FilterScope, SelectorSource
from feedsmith.models.fields import BODY, SUMMARY, TITLE, URL
from feedsmith.models.results import ExtractionResult, FieldResult
from feedsmith.models.rules import ContentField, FieldExclude, FieldFilter, FieldSelector
from feedsmith.utils.dates import format_datetime, parse_date_patterns
from feedsmith.utils.text import change_case, ensure_trailing_slash, format_url, generate_url

BACKGROUND_URL = re.compile(r'background(?:-image)?\s*:\s*url\(\s*[\'"]?([^\'")]+)[\'"]?\s*\)', re.IGNORECASE)


class FieldEvaluator:
    """Applies one ContentField to a document.

    Evaluation holds no state between calls, so independent fields can be
    evaluated in parallel.

    Attributes:
        URL_FIELDS: Field names whose values are normalised as URLs
        logger: Logger instance

    """

    URL_FIELDS: ClassVar[tuple[str, ...]] = ('url', 'image', 'background-image', 'author-link')

    def __init__(self):
        """Initialize the evaluator."""
        self.logger = logging.getLogger(__name__)

    def evaluate(
        self,
        field: ContentField,
        document: DocumentContext,
        scope: FilterScope = FilterScope.ARTICLE,
    ) -> FieldResult:
        """Evaluate a field's selectors in order until one yields a value.

        Args:
            field: Field rules
            document: Page (or page block) and prior values
            scope: Filter scope of this evaluation

        Returns:
            FieldResult with the values found, or flagged as stopped.

        Raises:
            DateParseError: If the value matches none of the field's date patterns

        """
        for selector in field.selectors:
            candidates, halted = self._select(field, selector, document)

            values = []
            for candidate in candidates:
                value = self._extract(field, candidate, document)
                if not value:
                    continue

                outcome = FieldFilter.apply(field.filters, value, scope)
                if outcome == FilterResult.STOP:
                    self.logger.debug(f'Stop filter matched for field {field.name}: {value[:80]}')
                    return FieldResult(field_name=field.name, stopped=True, selector=selector.expr)
                if outcome == FilterResult.SKIP:
                    self.logger.debug(f'Skip filter matched for field {field.name}: {value[:80]}')
                    continue
                values.append(value)

            if values:
                return FieldResult(
                    field_name=field.name,
                    values=[self._finish(field, value, document) for value in values],
                    selector=selector.expr,
                )
            if halted:
                break

        if not field.optional:
            self.logger.warning(f'Elements not found for field {field.name}')
        return FieldResult(field_name=field.name)

    def _select(
        self, field: ContentField, selector: FieldSelector, document: DocumentContext
    ) -> tuple[list[str], bool]:
        """Collect raw values for one selector.

        Returns:
            The candidate values and whether the stop expression halted selection.

        """
        if selector.source in (SelectorSource.CHANNEL, SelectorSource.STORE):
            values = document.channel if selector.source == SelectorSource.CHANNEL else document.store
            value = (values.get(selector.expr) or '').strip()
            match = selector.stop_pattern.search(value) if value and selector.stop_pattern is not None else None
            if match:
                value = value[: match.start()].strip()
            return ([value] if value else []), match is not None

        if document.page is None:
            return [], False

        if selector.source == SelectorSource.META:
            expr = selector.expr
            nodes = document.page.find_all(
                lambda tag: tag.name == 'meta' and expr in (tag.get('name'), tag.get('property'))
            )
            attribute = selector.attribute or 'content'
        else:
            try:
                nodes = document.page.select(selector.expr)
            except Exception as e:
                self.logger.warning(f'Invalid selector for field {field.name}: {selector.expr} ({e})')
                return [], False
            attribute = selector.attribute

        collected: list[str] = []
        halted = False
        stop_pattern = selector.stop_pattern
        for node in nodes:
            if FieldExclude.apply(selector.excludes, node):
                continue
            value = self._node_value(field, selector, node, attribute)
            if not value:
                continue

            if stop_pattern is not None:
                match = stop_pattern.search(value)
                if match:
                    value = value[: match.start()].strip()
                    halted = True
                    if value:
                        collected.append(value)
                    break

            collected.append(value)
            if not selector.multiple:
                break

        if selector.multiple and selector.separator and collected:
            return [selector.separator.join(collected).strip()], halted
        return collected, halted

    def _node_value(self, field: ContentField, selector: FieldSelector, node: Tag, attribute: str | None) -> str:
        if selector.background:
            match = BACKGROUND_URL.search(node.get('style') or '')
            return match.group(1).strip() if match else ''

        if attribute == 'srcset' or (attribute is None and selector.size and node.get('srcset')):
            return self._srcset_value(node.get('srcset') or '', selector.size)

        if attribute:
            value = node.get(attribute)
            if isinstance(value, list):
                value = ' '.join(value)
            return (value or '').strip()

        if selector.excludes:
            node = copy.copy(node)
            for child in node.find_all(True):
                if not child.decomposed and FieldExclude.apply(selector.excludes, child):
                    child.decompose()

        if field.name == 'body':
            return str(node).strip()
        return node.get_text(' ', strip=True)

    def _srcset_value(self, srcset: str, size: int | None) -> str:
        """Pick a srcset candidate: the requested width, else the widest."""
        best, best_width = '', -1
        for candidate in srcset.split(','):
            parts = candidate.strip().split()
            if not parts:
                continue
            width = int(parts[1][:-1]) if len(parts) > 1 and parts[1].endswith('w') and parts[1][:-1].isdigit() else 0
            if size is not None and width == size:
                return parts[0]
            if width > best_width:
                best, best_width = parts[0], width
        return best

    def _extract(self, field: ContentField, value: str, document: DocumentContext) -> str:
        """Run the field's extractors over a candidate value in order."""
        for extractor in field.extractors:
            extracted = extractor.apply(value, document.properties)
            if extracted is None:
                self.logger.warning(f'No match found for field {field.name}: pattern={extractor.expr}')
                continue
            value = extracted
        return value.strip()

    def _finish(self, field: ContentField, value: str, document: DocumentContext) -> str:
        """Apply text case, date patterns and URL normalisation."""
        value = change_case(value, field.text_case)
        if field.generate:
            value = generate_url(field.base_path or document.base_path, value)
            return ensure_trailing_slash(value) if field.trailing_slash else value

        if field.has_date_patterns():
            value = format_datetime(parse_date_patterns(field.name, value, list(field.date_patterns)))

        if field.name in self.URL_FIELDS or field.base_path is not None:
            value = format_url(field.base_path or document.base_path, value, field.remove_parameters)
            if field.trailing_slash:
                value = ensure_trailing_slash(value)
        return value


class ContentFieldsEvaluator:
    """Applies ContentFields bundles to pages and builds field maps.

    Attributes:
        evaluator: Evaluator used for each field
        console: Rich console instance for formatted output
        logger: Logger instance

    """

    def __init__(self, evaluator: FieldEvaluator | None = None, console: Console | None = None):
        """Initialize the bundle evaluator.

        Args:
            evaluator: Field evaluator. Defaults to None (creates new FieldEvaluator).
            console: Rich console instance for formatted output. Defaults to None (creates new Console).

        """
        self.evaluator = evaluator or FieldEvaluator()
        self.console = console or Console()
        self.logger = logging.getLogger(__name__)

    def evaluate(
        self,
        bundle: ContentFields,
        document: DocumentContext,
        scope: FilterScope = FilterScope.ARTICLE,
        code: str = '',
    ) -> list[ExtractionResult]:
        """Evaluate a bundle against every block matched by its root.

        Args:
            bundle: Field bundle to apply
            document: Page to apply it to
            scope: Filter scope of this evaluation
            code: Organisation code, for log messages

        Returns:
            One ExtractionResult per root block, in page order.

        """
        if document.page is None:
            return []

        if bundle.root:
            blocks = [document.scoped(node) for node in document.page.select(bundle.root)]
        else:
            blocks = [document]

        with logfire.span('evaluate_bundle', organisation=code, scope=scope.value, blocks=len(blocks)):
            results = [self.evaluate_block(bundle, block, scope, code) for block in blocks]

        valid = sum(1 for r in results if r.success)
        self.console.print(f'  ↻ {code or "content"}: {valid}/{len(results)} blocks extracted')
        return results

    def evaluate_block(
        self,
        bundle: ContentFields,
        document: DocumentContext,
        scope: FilterScope = FilterScope.ARTICLE,
        code: str = '',
    ) -> ExtractionResult:
        """Evaluate every configured role of a bundle against one block."""
        result = ExtractionResult()

        if bundle.has_validator():
            assert bundle.validator is not None
            check = self.evaluator.evaluate(bundle.validator, document, scope)
            if not check.found:
                result.valid = False
                return result

        for role in bundle.roles():
            field = bundle.get(role)
            if field is None:
                continue
            try:
                field_result = self.evaluator.evaluate(field, document, scope)
            except DateParseError as e:
                self.logger.warning(f'{e} (organisation {code})')
                logfire.warn('Date patterns exhausted', field=e.field_name, organisation=code, patterns=e.patterns)
                result.errors.append(str(e))
                continue

            if field_result.stopped:
                result.stopped = True
                logfire.info('Content stopped by filter', field=role, organisation=code)
                return result
            if field_result.found:
                result.fields[role] = ','.join(field_result.values)

        return result

    def evaluate_teasers(self, page: PageConfig, document: DocumentContext, code: str = '') -> list[ExtractionResult]:
        """Extract teasers from a listing page, keeping those that pass the page rules.

        A teaser is kept when it is valid and not stopped, its URL passes
        the page conditions and, if keywords are configured, its title
        contains one of them.

        Args:
            page: Page configuration
            document: Fetched listing page
            code: Organisation code, for log messages

        Returns:
            The accepted teasers, in page order.

        """
        keywords = [k.lower() for k in page.teasers.loading.keywords]
        accepted = []
        for bundle in page.teasers.fields:
            for result in self.evaluate(bundle, document, FilterScope.TEASER, code):
                if not result.success:
                    continue
                url = result.fields.get_value(URL)
                if url and not page.accepts(url):
                    self.logger.debug(f'Teaser rejected by page conditions: {url}')
                    continue
                title = result.fields.get_value(TITLE).lower()
                if keywords and not any(keyword in title for keyword in keywords):
                    continue
                accepted.append(result)
        return accepted

    def evaluate_article(
        self,
        page: PageConfig,
        document: DocumentContext,
        code: str = '',
        config: ContentConfig | None = None,
    ) -> ExtractionResult | None:
        """Extract an article page with the first bundle whose validator accepts it.

        Args:
            page: Page configuration
            document: Fetched article page
            code: Organisation code, for log messages
            config: Content config of the page. When given, a bundle without
                a summary rule gets a summary derived from its body.

        Returns:
            The first valid result, or None if no bundle accepts the page.

        """
        for bundle in page.articles.fields:
            results = self.evaluate(bundle, document, FilterScope.ARTICLE, code)
            for result in results:
                if result.valid:
                    if config is not None and not bundle.has(SUMMARY):
                        self.add_summary(result, config)
                    return result
        return None

    def add_summary(self, result: ExtractionResult, config: ContentConfig) -> None:
        """Derive the summary of a result from its body, within the config's summary limits."""
        body = result.fields.get_value(BODY)
        if not body or result.fields.is_set(SUMMARY) or result.stopped:
            return
        summary = format_summary(body, config.summary, config.get_filters())
        if summary:
            result.fields[SUMMARY] = summary
        else:
            self.logger.debug('No summary could be derived from the body')
