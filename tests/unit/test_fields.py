from datetime import datetime

from feedsmith.models.config import ContentConfig, OrganisationConfig
from feedsmith.models.content import ContentItem, Organisation
from feedsmith.models.enums import ContentType
from feedsmith.models.fields import Fields, merge


def test_add_fills_absent_and_empty_keys_only():
    fields = Fields({'title': 'Kept', 'summary': ''})

    fields.add({'title': 'Replaced', 'summary': 'Filled', 'author': 'Jane'})

    assert fields == {'title': 'Kept', 'summary': 'Filled', 'author': 'Jane'}


def test_first_writer_wins_across_sources():
    fields = Fields().add({'code': 'A'}, {'code': 'B', 'url': 'u'}, {'url': 'v'})

    assert fields['code'] == 'A'
    assert fields['url'] == 'u'


def test_add_skips_none_sources_and_values():
    fields = Fields({'title': ''})

    fields.add(None, {'title': None}, {'title': 'Late'})

    assert fields['title'] == 'Late'


def test_add_is_idempotent():
    source = {'title': 'T', 'url': 'https://example.com'}
    once = Fields().add(source)
    twice = Fields().add(source).add(source)

    assert once == twice


def test_sources_are_not_modified():
    source = Fields({'title': 'Source'})
    Fields({'title': 'Target'}).add(source)

    assert source == {'title': 'Source'}


def test_add_accepts_field_sources():
    organisation = Organisation(code='ACME', name='Acme Corp')
    config = ContentConfig(content_type=ContentType.POST, fields={'category': 'news'})

    fields = Fields().add(organisation, config)

    assert fields == {'code': 'ACME', 'organisation': 'Acme Corp', 'category': 'news'}


def test_merge_mutates_and_returns_target():
    target = Fields({'id': '1'})

    result = merge(target, [{'id': '2', 'title': 'T'}, None])

    assert result is target
    assert target == {'id': '1', 'title': 'T'}


def test_get_value_fallback():
    fields = Fields({'title': '', 'url': 'u'})

    assert fields.get_value('title', 'Untitled') == 'Untitled'
    assert fields.get_value('missing') == ''
    assert fields.get_value('url') == 'u'
    assert fields.is_set('url')
    assert not fields.is_set('title')


def test_copy_is_independent():
    fields = Fields({'title': 'T'})
    copied = fields.copy()
    copied['title'] = 'Changed'

    assert isinstance(copied, Fields)
    assert fields['title'] == 'T'


def test_content_item_to_fields():
    item = ContentItem(
        id=42,
        code='ACME',
        content_type=ContentType.POST,
        title='Hello',
        url='https://acme.example/hello',
        published_date=datetime(2024, 3, 7, 9, 30),
        values={'title': 'Ignored', 'author': 'Jane'},
    )

    fields = item.to_fields()

    assert fields['id'] == '42'
    assert fields['title'] == 'Hello'
    assert fields['published-date'] == '2024-03-07 09:30:00'
    assert fields['author'] == 'Jane'


def test_organisation_config_fields_include_code_and_name():
    config = OrganisationConfig(code='ACME', name='Acme Corp', fields={'site': 'x'})

    assert config.to_fields() == {'site': 'x', 'code': 'ACME', 'organisation': 'Acme Corp'}
