import csv
import io

import pytest

from feedsmith.core.extraction import ContentFieldsEvaluator, DocumentContext
from feedsmith.core.pipeline import Pipeline
from feedsmith.models.content import ContentItem, Organisation, OrganisationSite, Site
from feedsmith.models.enums import ContentStatus, ContentType, EnvironmentName
from feedsmith.storage import InMemoryContentStore, InMemoryImageProvider, InMemoryOrganisationStore

SITE = Site(id='main', name='Main', content_bucket='content-bucket')


@pytest.fixture
def store():
    return InMemoryContentStore()


@pytest.fixture
def pipeline(settings, store, clients):
    organisations = InMemoryOrganisationStore(
        organisations=[Organisation(code='ACME', name='Acme Corp')],
        sites=[OrganisationSite(code='ACME', site_id='main')],
    )
    return Pipeline(settings, store, organisations, InMemoryImageProvider(), clients)


@pytest.fixture
def feeds(host_client):
    delivered = []

    def put(path, directory, timeout):
        delivered.append((directory, list(csv.reader(io.StringIO(path.read_text())))))

    host_client.put.side_effect = put
    return delivered


def test_load_configs(pipeline):
    assert pipeline.load_configs() == 1
    assert pipeline.registry.get('ACME').name == 'Acme Corp'
    assert len(pipeline.registry.by_type(ContentType.POST)) == 1
    assert pipeline.registry.by_type(ContentType.TOOL) == []


def test_extract_then_deploy(pipeline, store, feeds, article_html):
    pipeline.load_configs()
    page = pipeline.registry.get('ACME').get(ContentType.POST).pages[0]
    article = ContentFieldsEvaluator().evaluate_article(
        page, DocumentContext.from_html(article_html.replace('First', 'Café first'))
    )
    store.items.append(
        ContentItem(
            id=7,
            code='ACME',
            content_type=ContentType.POST,
            status=ContentStatus.PENDING,
            title=article.fields['title'],
            url='https://acme.example/blog/my-awesome-article',
            values=dict(article.fields),
        )
    )

    results = pipeline.deploy_type(ContentType.POST, SITE, EnvironmentName.STAGE)

    assert len(results) == 1
    assert results[0].success
    assert store.items[0].status == ContentStatus.STAGED
    directory, rows = feeds[0]
    assert directory == '/srv/stage/posts'
    record = dict(zip(*rows))
    assert record['ID'] == '00007'
    assert record['Title'] == 'My Awesome Article'
    assert record['URL'] == 'https://acme.example/blog/my-awesome-article/'
    assert record['Organisation'] == 'Acme Corp'
    assert record['Published'] == '2023-10-27 00:00:00'
    assert 'Caf&#0233; first paragraph.' in record['Body']


def test_deploy_type_with_nothing_to_deploy(pipeline, feeds):
    pipeline.load_configs()

    results = pipeline.deploy_type(ContentType.POST, SITE, EnvironmentName.PROD)

    assert len(results) == 1
    assert results[0].rows == 0
    assert feeds[0][1] == [['ID', 'Title', 'URL', 'Organisation', 'Published', 'Body']]


def test_close_closes_clients(pipeline, clients, mocker):
    close_all = mocker.spy(clients, 'close_all')

    pipeline.close()

    close_all.assert_called_once_with()


def test_start_logging(pipeline, mocker, tmp_path):
    setup = mocker.patch('feedsmith.core.pipeline.setup_local_logging', return_value=tmp_path / 'deploy_1.log')
    configure = mocker.patch('feedsmith.core.pipeline.configure_logfire', return_value=False)

    assert pipeline.start_logging('DEBUG') == tmp_path / 'deploy_1.log'
    setup.assert_called_once_with(level='DEBUG', prefix='deploy')
    configure.assert_called_once_with()


def test_site_without_content_bucket_is_reported(pipeline, store, feeds, caplog):
    pipeline.load_configs()
    store.items.append(
        ContentItem(id=1, code='ACME', content_type=ContentType.POST, status=ContentStatus.PENDING, title='Post')
    )

    site = SITE.model_copy(update={'content_bucket': ''})

    results = pipeline.deploy_type(ContentType.POST, site, EnvironmentName.STAGE)

    assert results == []
    assert store.updates == []
    assert feeds == []
    assert 'Error deploying post for ACME' in caplog.text


def test_failing_organisation_does_not_stop_the_run(pipeline, feeds, config_dir, mocker):
    (config_dir / 'beta.yml').write_text('code: BETA\norganisation: Beta Ltd\npost:\n  fields:\n    category: news\n')
    pipeline.load_configs()
    deploy = pipeline.deployer.deploy

    def flaky(config, site, environment, code=None):
        if code == 'ACME':
            raise OSError('disk full')
        return deploy(config, site, environment, code=code)

    mocker.patch.object(pipeline.deployer, 'deploy', side_effect=flaky)

    results = pipeline.deploy_type(ContentType.POST, SITE, EnvironmentName.STAGE)

    assert len(results) == 1
    assert results[0].success
    assert len(feeds) == 1
