import pytest
from bs4 import BeautifulSoup
from pydantic import ValidationError

from feedsmith.models.enums import ConditionAction, FilterResult, FilterScope, MatchType
from feedsmith.models.rules import (
    ContentField,
    FieldCondition,
    FieldExclude,
    FieldExtractor,
    FieldFilter,
    FieldSelector,
)


def _node(html: str):
    return BeautifulSoup(html, 'lxml').body.contents[0]


def test_selector_multiple_defaults_to_true_for_body():
    assert FieldSelector(field_name='body', expr='article p').multiple is True
    assert FieldSelector(field_name='title', expr='h1').multiple is False
    assert FieldSelector(expr='h1').multiple is False


def test_selector_explicit_multiple_wins():
    assert FieldSelector(field_name='body', expr='p', multiple=False).multiple is False
    assert FieldSelector(field_name='tags', expr='a', multiple=True).multiple is True


def test_selector_is_immutable():
    selector = FieldSelector(field_name='title', expr='h1')
    with pytest.raises(ValidationError):
        selector.expr = 'h2'


def test_exclude_parse_forms():
    assert FieldExclude.parse('div.ad') == FieldExclude(tag='div', class_name='ad')
    assert FieldExclude.parse('section#promo') == FieldExclude(tag='section', id='promo')
    assert FieldExclude.parse('script') == FieldExclude(tag='script')


def test_exclude_matches_all_set_axes():
    node = _node('<div class="ad wide" id="x">Buy</div>')

    assert FieldExclude(tag='div', class_name='ad').matches(node)
    assert FieldExclude(class_name='wide').matches(node)
    assert not FieldExclude(tag='span', class_name='ad').matches(node)
    assert not FieldExclude(tag='div', class_name='ad', id='y').matches(node)


def test_exclude_apply_is_any_of_list():
    node = _node('<p class="note">Text</p>')
    excludes = [FieldExclude(tag='div'), FieldExclude(tag='p', class_name='note')]

    assert FieldExclude.apply(excludes, node)
    assert not FieldExclude.apply([FieldExclude(tag='div')], node)
    assert not FieldExclude.apply([], node)


def test_filter_stop_dominates_skip_in_either_order():
    skip = FieldFilter(expr='.*Sponsored.*')
    stop = FieldFilter(expr='.*Webinar.*', stop=True)
    text = 'Sponsored: Webinar'

    assert FieldFilter.apply([skip, stop], text, FilterScope.ARTICLE) == FilterResult.STOP
    assert FieldFilter.apply([stop, skip], text, FilterScope.ARTICLE) == FilterResult.STOP


def test_filter_skip_and_none():
    filters = [FieldFilter(expr='.*Sponsored.*')]

    assert FieldFilter.apply(filters, 'Sponsored post', FilterScope.TEASER) == FilterResult.SKIP
    assert FieldFilter.apply(filters, 'Regular post', FilterScope.TEASER) == FilterResult.NONE
    assert FieldFilter.apply([], 'anything', FilterScope.TEASER) == FilterResult.NONE


def test_filter_requires_full_match():
    assert FieldFilter.apply([FieldFilter(expr='Sponsored')], 'Sponsored post', FilterScope.ALL) == FilterResult.NONE


def test_filter_scope_restriction():
    teaser_only = FieldFilter(expr='.*ad.*', scope=FilterScope.TEASER)

    assert teaser_only.applies(FilterScope.TEASER)
    assert not teaser_only.applies(FilterScope.ARTICLE)
    assert FieldFilter(expr='x').applies(FilterScope.ARTICLE)
    assert FieldFilter.apply([teaser_only], 'an ad', FilterScope.ARTICLE) == FilterResult.NONE


def test_extractor_default_format_takes_first_group():
    extractor = FieldExtractor(expr=r'(\d+) min read')

    assert extractor.apply('About 5 min read here') == '5'


def test_extractor_format_with_back_references():
    extractor = FieldExtractor(expr=r'(\w+) (\d+), (\d{4})', format='$3-$1-$2')

    assert extractor.apply('Posted on March 7, 2024 by Jane') == '2024-March-7'


def test_extractor_all_concatenates_every_match():
    extractor = FieldExtractor(expr=r'#(\w+)', format='$1;', match=MatchType.ALL)

    assert extractor.apply('#cloud and #devops and #ai') == 'cloud;devops;ai;'


def test_extractor_without_groups_uses_whole_match():
    assert FieldExtractor(expr=r'\d{4}').apply('since 1999, really') == '1999'


def test_extractor_no_match_returns_none():
    assert FieldExtractor(expr=r'(\d+)').apply('no digits') is None


def test_extractor_format_properties():
    extractor = FieldExtractor(expr=r'(\d+) (\w+)', format='$2 $1, ${current-year}')

    assert extractor.apply('12 May', {'current-year': '2024'}) == 'May 12, 2024'


def test_extractor_dotall_spans_lines():
    assert FieldExtractor(expr=r'start(.*)end').apply('start\nmiddle\nend') == '\nmiddle\n'


def test_condition_first_match_decides():
    conditions = [
        FieldCondition(expr='.*/events/.*', action=ConditionAction.REJECT),
        FieldCondition(expr='.*/blog/.*'),
    ]

    assert FieldCondition.accept(conditions, 'https://acme.example/blog/post')
    assert not FieldCondition.accept(conditions, 'https://acme.example/events/blog/x')
    assert not FieldCondition.accept(conditions, 'https://acme.example/about')


def test_content_field_helpers():
    field = ContentField(
        name='published-date',
        selectors=(FieldSelector(field_name='published-date', expr='time'),),
        date_patterns=('MMM d, yyyy', 'yyyy-MM-dd'),
    )

    assert field.has_selectors()
    assert field.has_date_patterns()
    assert field.date_pattern == 'MMM d, yyyy'
    assert not ContentField(name='title').has_selectors()
    assert ContentField(name='title').date_pattern is None
