"""Runtime settings loaded from the environment."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from feedsmith.models.enums import ContentType, EnvironmentName


class TransportSettings(BaseModel):
    """Timeouts and retry limits for remote transports.

    Attributes:
        timeout: Seconds allowed for a single network call
        retry_attempts: Attempts per operation, including the first
        retry_wait_min: Minimum backoff between attempts in seconds
        retry_wait_max: Maximum backoff between attempts in seconds

    """

    timeout: float = Field(default=30.0, gt=0)
    retry_attempts: int = Field(default=3, ge=1)
    retry_wait_min: float = 1.0
    retry_wait_max: float = 10.0


class EnvironmentSettings(BaseModel):
    """Settings for one deployment environment.

    Attributes:
        name: Environment name
        feeds_path: Remote directory the feed files are copied below
        images_url: Base URL for images served in this environment

    """

    name: EnvironmentName
    feeds_path: str = ''
    images_url: str = ''


class AppSettings(BaseModel):
    """Process-wide settings passed to the deployment components.

    Attributes:
        config_dir: Directory holding content.yml and the organisation documents
        working_dir: Local directory where feed files are staged
        images_path: Path segment of uploaded content images (app.path.images)
        feed_paths: Feed path per content type (app.files.feeds.<type>)
        environments: Settings per environment name
        transport: Retry and timeout settings for remote copies

    """

    config_dir: Path = Path('config')
    working_dir: Path = Path('.feedsmith') / 'work'
    images_path: str = '/images'
    feed_paths: dict[ContentType, str] = Field(default_factory=dict)
    environments: dict[EnvironmentName, EnvironmentSettings] = Field(default_factory=dict)
    transport: TransportSettings = Field(default_factory=TransportSettings)

    def feed_path(self, content_type: ContentType) -> str:
        """Return the feed path for a content type, or an empty string."""
        return self.feed_paths.get(content_type, '')

    def environment(self, name: EnvironmentName) -> EnvironmentSettings:
        """Return the settings for an environment.

        Raises:
            ValueError: If the environment has not been configured

        """
        if name not in self.environments:
            raise ValueError(f'Unknown environment: {name.value}. Configured: {[e.value for e in self.environments]}')
        return self.environments[name]

    @classmethod
    def from_env(cls) -> 'AppSettings':
        """Load settings from FEEDSMITH_* variables, reading .env first."""
        load_dotenv()

        feed_paths = {}
        for content_type in ContentType:
            value = os.getenv(f'FEEDSMITH_FEEDS_{content_type.env_key}')
            if value:
                feed_paths[content_type] = value

        environments = {}
        for name in EnvironmentName:
            prefix = f'FEEDSMITH_{name.name}'
            environments[name] = EnvironmentSettings(
                name=name,
                feeds_path=os.getenv(f'{prefix}_FEEDS_PATH', ''),
                images_url=os.getenv(f'{prefix}_IMAGES_URL', ''),
            )

        transport = TransportSettings(
            timeout=float(os.getenv('FEEDSMITH_TRANSPORT_TIMEOUT', '30')),
            retry_attempts=int(os.getenv('FEEDSMITH_TRANSPORT_RETRIES', '3')),
        )

        return cls(
            config_dir=Path(os.getenv('FEEDSMITH_CONFIG_DIR', 'config')),
            working_dir=Path(os.getenv('FEEDSMITH_WORKING_DIR', str(Path('.feedsmith') / 'work'))),
            images_path=os.getenv('FEEDSMITH_IMAGES_PATH', '/images'),
            feed_paths=feed_paths,
            environments=environments,
            transport=transport,
        )
