import pytest

from feedsmith.core.transport import TransportClients
from feedsmith.models.enums import ContentType, EnvironmentName
from feedsmith.settings import AppSettings, EnvironmentSettings, TransportSettings

DEFAULTS_YAML = """
post:
  filename: posts.xlsx
  sheet: Posts
  default-date-pattern: yyyy-MM-dd
  fields:
    site: example
  output:
    ID: ${id}
    Title: ${title}
    URL: ${url}
    Organisation: ${organisation}
    Published: ${pubdate}
    Body: ${body}
  html-fields:
    - Body
  teasers:
    loading:
      wait: 1000
    fields:
      root: div.teaser
      title: h2
      url:
        selector:
          expr: a
          attribute: href
tool:
  filename: tools.csv
  output:
    ID: ${id}
    Title: ${title}
"""

ORGANISATION_YAML = """
code: ACME
organisation: Acme Corp
post:
  trailing-slash: true
  fields:
    category: news
  url: https://acme.example/blog
  base-path: https://acme.example
  article-fields:
    title: h1.title
    published-date:
      selector: span.date
      date-pattern: MMMM d, yyyy
    body:
      selector:
        expr: article p
        exclude: p.ad
"""


@pytest.fixture
def article_html():
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Test Page</title>
        <meta property="og:image" content="/img/cover.png?w=800">
        <meta name="description" content="A short description">
    </head>
    <body>
        <h1 class="title">My Awesome Article</h1>
        <div class="meta">
            <span class="author">Jane Doe</span>
            <span class="date">October 27, 2023</span>
        </div>
        <article>
            <p>First paragraph.</p>
            <p class="ad">Buy now!</p>
            <p>Second paragraph.</p>
            <p>Read more below</p>
            <p>Hidden paragraph.</p>
        </article>
        <a class="read" href="/blog/my-awesome-article?utm=feed">Permalink</a>
    </body>
    </html>
    """


@pytest.fixture
def listing_html():
    return """
    <html>
    <body>
        <div class="teaser">
            <h2>Cloud Migration Guide</h2>
            <a href="/blog/cloud-migration">Read</a>
        </div>
        <div class="teaser">
            <h2>Sponsored: Webinar</h2>
            <a href="/events/webinar">Read</a>
        </div>
        <div class="teaser">
            <h2>Kubernetes Tips</h2>
            <a href="/blog/kubernetes-tips">Read</a>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / 'config'
    directory.mkdir()
    (directory / 'content.yml').write_text(DEFAULTS_YAML)
    (directory / 'acme.yml').write_text(ORGANISATION_YAML)
    return directory


@pytest.fixture
def settings(tmp_path, config_dir):
    return AppSettings(
        config_dir=config_dir,
        working_dir=tmp_path / 'work',
        images_path='/images',
        feed_paths={ContentType.POST: '/posts', ContentType.TOOL: '/tools'},
        environments={
            EnvironmentName.STAGE: EnvironmentSettings(
                name=EnvironmentName.STAGE, feeds_path='/srv/stage', images_url='https://stage.example'
            ),
            EnvironmentName.PROD: EnvironmentSettings(
                name=EnvironmentName.PROD, feeds_path='/srv/prod', images_url='https://cdn.example'
            ),
        },
        transport=TransportSettings(timeout=5, retry_attempts=3, retry_wait_min=0, retry_wait_max=0),
    )


@pytest.fixture
def bucket_client(mocker):
    return mocker.Mock()


@pytest.fixture
def host_client(mocker):
    client = mocker.Mock()
    client.is_connected.return_value = True
    return client


@pytest.fixture
def clients(settings, bucket_client, host_client):
    return TransportClients(lambda: bucket_client, lambda environment: host_client, settings.transport)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line('markers', 'integration: marks tests as integration tests')
    config.addinivalue_line('markers', 'unit: marks tests as unit tests')


def pytest_collection_modifyitems(config, items):
    """Apply directory-based marks to collected test items."""

    for item in items:
        # Get the test file path
        if hasattr(item, 'fspath'):
            file_path = str(item.fspath)

            # Add marks based on directory
            if '/tests/integration/' in file_path:
                item.add_marker(pytest.mark.integration)
            elif '/tests/unit/' in file_path:
                item.add_marker(pytest.mark.unit)
