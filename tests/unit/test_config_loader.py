import pytest

from feedsmith.core.config import ConfigDefaults, ContentConfigRegistry, OrganisationConfigLoader
from feedsmith.core.config.loader import read_yaml
from feedsmith.exceptions import ConfigurationError, DefaultsNotInitializedError
from feedsmith.models.config import OrganisationConfig
from feedsmith.models.enums import ContentType


@pytest.fixture
def defaults(config_dir):
    return ConfigDefaults().load(config_dir)


def test_defaults_not_loaded_raises():
    defaults = ConfigDefaults()

    with pytest.raises(DefaultsNotInitializedError):
        defaults.get(ContentType.POST)


def test_organisation_parse_before_defaults_raises(config_dir):
    loader = OrganisationConfigLoader(ConfigDefaults(), config_dir)

    with pytest.raises(DefaultsNotInitializedError):
        loader.load('acme.yml')


def test_defaults_load_reads_content_types(defaults):
    post = defaults.get(ContentType.POST)

    assert defaults.loaded
    assert post.filename == 'posts.xlsx'
    assert post.sheet == 'Posts'
    assert post.headers == ['ID', 'Title', 'URL', 'Organisation', 'Published', 'Body']
    assert defaults.get(ContentType.EVENT) is None


def test_defaults_load_is_a_no_op_once_loaded(defaults, tmp_path):
    other = tmp_path / 'other'
    other.mkdir()
    (other / 'content.yml').write_text('tool:\n  filename: other.csv\n')

    defaults.load(other)

    assert defaults.get(ContentType.TOOL).filename == 'tools.csv'


def test_defaults_hand_out_copies(defaults):
    first = defaults.get(ContentType.POST)
    first.fields['site'] = 'changed'
    first.pages.clear()

    second = defaults.get(ContentType.POST)
    assert second.fields['site'] == 'example'
    assert len(second.pages) == 1


def test_organisation_overlays_defaults(defaults, config_dir):
    organisation = OrganisationConfigLoader(defaults, config_dir).load('acme.yml')

    assert organisation.code == 'ACME'
    assert organisation.name == 'Acme Corp'
    post = organisation.get(ContentType.POST)
    assert post.code == 'ACME'
    assert post.name == 'Acme Corp'
    assert post.filename == 'posts.xlsx'
    assert post.trailing_slash is True
    assert post.fields['site'] == 'example'
    assert post.fields['category'] == 'news'
    assert post.fields['organisation'] == 'Acme Corp'
    assert organisation.get(ContentType.TOOL) is None

    page = post.pages[0]
    assert page.url == 'https://acme.example/blog'
    assert page.base_path == 'https://acme.example'
    assert page.teasers.loading.wait == 1000
    assert page.articles.fields[0].has('published-date')


def test_organisation_without_code_is_rejected(defaults):
    loader = OrganisationConfigLoader(defaults, '.')

    with pytest.raises(ConfigurationError) as exc_info:
        loader.parse({'organisation': 'Nameless', 'post': {}}, 'nameless.yml')

    assert exc_info.value.key == 'code'


def test_load_all_skips_defaults_document(defaults, config_dir):
    (config_dir / 'beta.yml').write_text('code: BETA\norganisation: Beta Ltd\ntool: {}\n')

    organisations = OrganisationConfigLoader(defaults, config_dir).load_all()

    assert [o.code for o in organisations] == ['ACME', 'BETA']


def test_read_yaml_rejects_non_map(tmp_path):
    path = tmp_path / 'list.yml'
    path.write_text('- a\n- b\n')

    with pytest.raises(ConfigurationError):
        read_yaml(path)


def test_read_yaml_rejects_invalid_yaml(tmp_path):
    path = tmp_path / 'broken.yml'
    path.write_text('post: [unclosed\n')

    with pytest.raises(ConfigurationError):
        read_yaml(path)


def test_read_yaml_empty_document(tmp_path):
    path = tmp_path / 'empty.yml'
    path.write_text('')

    assert read_yaml(path) == {}


def test_registry_lookups(defaults, config_dir):
    organisation = OrganisationConfigLoader(defaults, config_dir).load('acme.yml')
    registry = ContentConfigRegistry().load([organisation])

    assert len(registry) == 1
    assert registry.get('ACME') is organisation
    assert registry.get_by_name('Acme Corp') is organisation
    assert [c.code for c in registry.by_type(ContentType.POST)] == ['ACME']
    assert registry.by_type(ContentType.TOOL) == []


def test_registry_set_replaces_previous_entry():
    registry = ContentConfigRegistry()
    registry.set(OrganisationConfig(code='ACME', name='Old Name'))
    registry.set(OrganisationConfig(code='ACME', name='New Name'))

    assert len(registry) == 1
    assert registry.get_by_name('Old Name') is None
    assert registry.get('ACME').name == 'New Name'
