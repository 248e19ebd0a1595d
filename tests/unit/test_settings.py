from pathlib import Path

import pytest

from feedsmith.models.enums import ContentType, EnvironmentName
from feedsmith.settings import AppSettings


@pytest.fixture
def clean_env(monkeypatch):
    # Keep a developer's .env out of the test
    monkeypatch.setattr('feedsmith.settings.load_dotenv', lambda: False)
    return monkeypatch


def test_from_env(clean_env):
    clean_env.setenv('FEEDSMITH_CONFIG_DIR', '/etc/feedsmith')
    clean_env.setenv('FEEDSMITH_WORKING_DIR', '/var/feedsmith')
    clean_env.setenv('FEEDSMITH_IMAGES_PATH', '/uploads')
    clean_env.setenv('FEEDSMITH_FEEDS_POST', '/posts')
    clean_env.setenv('FEEDSMITH_FEEDS_WHITE_PAPERS', '/white-papers')
    clean_env.setenv('FEEDSMITH_STAGE_FEEDS_PATH', '/srv/stage')
    clean_env.setenv('FEEDSMITH_STAGE_IMAGES_URL', 'https://stage.example')
    clean_env.setenv('FEEDSMITH_PROD_FEEDS_PATH', '/srv/prod')
    clean_env.setenv('FEEDSMITH_TRANSPORT_TIMEOUT', '12.5')
    clean_env.setenv('FEEDSMITH_TRANSPORT_RETRIES', '5')

    settings = AppSettings.from_env()

    assert settings.config_dir == Path('/etc/feedsmith')
    assert settings.working_dir == Path('/var/feedsmith')
    assert settings.images_path == '/uploads'
    assert settings.feed_path(ContentType.POST) == '/posts'
    assert settings.feed_path(ContentType.WHITE_PAPER) == '/white-papers'
    assert settings.feed_path(ContentType.EVENT) == ''
    assert settings.environment(EnvironmentName.STAGE).images_url == 'https://stage.example'
    assert settings.environment(EnvironmentName.PROD).feeds_path == '/srv/prod'
    assert settings.transport.timeout == 12.5
    assert settings.transport.retry_attempts == 5


def test_defaults(clean_env):
    for name in ('FEEDSMITH_CONFIG_DIR', 'FEEDSMITH_IMAGES_PATH', 'FEEDSMITH_TRANSPORT_RETRIES'):
        clean_env.delenv(name, raising=False)

    settings = AppSettings.from_env()

    assert settings.config_dir == Path('config')
    assert settings.images_path == '/images'
    assert settings.transport.retry_attempts == 3


def test_unknown_environment_raises():
    with pytest.raises(ValueError):
        AppSettings().environment(EnvironmentName.PROD)
