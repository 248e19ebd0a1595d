"""Main pipeline for loading content configuration and deploying feeds."""

import logging
from pathlib import Path

import logfire
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from feedsmith.core.config import ConfigDefaults, ContentConfigRegistry, OrganisationConfigLoader
from feedsmith.core.deployment import ContentDeployer
from feedsmith.core.transport import TransportClients
from feedsmith.exceptions import FeedsmithError
from feedsmith.models.content import Site
from feedsmith.models.enums import ContentType, EnvironmentName
from feedsmith.models.results import DeploymentResult
from feedsmith.settings import AppSettings
from feedsmith.storage import ContentStore, ImageProvider, OrganisationStore
from feedsmith.utils.logging import configure_logfire, setup_local_logging


class Pipeline:
    """Loads the configuration tree once and deploys feeds per content type.

    Attributes:
        custom_theme: Rich theme for console output
        console: Rich console instance for formatted output
        settings: Application settings
        defaults: Global content defaults, loaded once
        loader: Organisation document loader
        registry: Loaded organisation configs
        clients: Transport client registry
        deployer: Deployer used for every config
        logger: Logger instance for detailed run tracking

    """

    def __init__(
        self,
        settings: AppSettings,
        store: ContentStore,
        organisations: OrganisationStore,
        images: ImageProvider,
        clients: TransportClients,
    ):
        """Initialize the pipeline with its collaborators.

        Args:
            settings: Application settings
            store: Content items and their persistence
            organisations: Organisation and organisation-site lookup
            images: Organisation thumbnails and logos
            clients: Transport client registry

        """
        self.custom_theme = Theme(
            {
                'info': 'dim cyan',
                'warning': 'magenta',
                'danger': 'bold red',
                'success': 'bold green',
                'step': 'bold blue',
            }
        )
        self.console = Console(theme=self.custom_theme)
        self.settings = settings
        self.defaults = ConfigDefaults(console=self.console)
        self.loader = OrganisationConfigLoader(self.defaults, settings.config_dir, console=self.console)
        self.registry = ContentConfigRegistry()
        self.clients = clients
        self.deployer = ContentDeployer(
            store, organisations, images, settings, clients, registry=self.registry, console=self.console
        )
        self.logger = logging.getLogger(__name__)

    def start_logging(self, level: str = 'INFO') -> Path:
        """Write this run's log to a file and enable logfire if a token is set."""
        log_file = setup_local_logging(level=level, prefix='deploy')
        configure_logfire()
        self.console.print(f'[info]Logging to {log_file}[/info]')
        return log_file

    def load_configs(self) -> int:
        """Load the defaults and every organisation document.

        Returns:
            Number of organisations loaded.

        """
        with logfire.span('load_configs', directory=str(self.settings.config_dir)):
            self.defaults.load(self.settings.config_dir)
            self.registry.load(self.loader.load_all())
        self.logger.info(f'Loaded {len(self.registry)} organisation configs from {self.settings.config_dir}')
        return len(self.registry)

    def deploy_type(
        self,
        content_type: ContentType,
        site: Site,
        environment: EnvironmentName,
    ) -> list[DeploymentResult]:
        """Deploy every organisation's feed of one content type.

        A failing organisation is logged and the run continues with the next.

        Args:
            content_type: Type to deploy
            site: Site the content belongs to
            environment: Target environment

        Returns:
            One DeploymentResult per successfully processed config.

        """
        results = []
        configs = self.registry.by_type(content_type)

        with logfire.span('deploy_type', content_type=content_type.value, configs=len(configs)):
            for idx, config in enumerate(configs, 1):
                self.console.print(f'\n[bold blue]Deploying {config.code} ({idx}/{len(configs)})[/bold blue]')
                try:
                    results.append(self.deployer.deploy(config, site, environment, code=config.code))
                except (FeedsmithError, ValueError, OSError) as e:
                    logfire.error('Error deploying content', code=config.code, error=str(e))
                    self.logger.exception(f'Error deploying {content_type.value} for {config.code}')
                    self.console.print(f'[danger]Error deploying {config.code}: {e}[/danger]')

        self.print_summary(results)
        return results

    def print_summary(self, results: list[DeploymentResult]) -> None:
        """Print a table of deployment results."""
        table = Table(title='Deployment summary')
        table.add_column('Type')
        table.add_column('Environment')
        table.add_column('Rows', justify='right')
        table.add_column('Changed', justify='right')
        table.add_column('Excluded', justify='right')
        table.add_column('Delivered')
        for result in results:
            table.add_row(
                result.content_type.value,
                result.environment.value,
                str(result.rows),
                str(result.changed),
                str(len(result.excluded)),
                '[success]yes[/success]' if result.success else '[danger]no[/danger]',
            )
        self.console.print(table)

    def close(self) -> None:
        """Close the transport clients."""
        self.clients.close_all()
