"""Deploys the content of one type to an environment as a feed."""

import logging

import logfire
from rich.console import Console

from feedsmith.core.config import ContentConfigRegistry
from feedsmith.core.deployment.state import next_status
from feedsmith.core.output import ContentHandler
from feedsmith.core.transport import TransportClients
from feedsmith.exceptions import TransportError
from feedsmith.models.config import ContentConfig
from feedsmith.models.content import ContentImage, ContentItem, ImageType, Site
from feedsmith.models.enums import EnvironmentName
from feedsmith.models.fields import (
    IMAGE,
    IMAGE_TEXT,
    ORGANISATION,
    PUBLISHED,
    THUMBNAIL,
    THUMBNAIL_TEXT,
    TRACKING,
    URL,
    Fields,
)
from feedsmith.models.results import DeploymentResult
from feedsmith.settings import AppSettings, EnvironmentSettings
from feedsmith.storage import ContentStore, ImageProvider, OrganisationStore
from feedsmith.utils.text import ensure_trailing_slash, is_relative_url


class ContentDeployer:
    """Builds a content type's feed, advances item statuses and ships the files.

    Attributes:
        store: Content items and their persistence
        organisations: Organisation and organisation-site lookup
        images: Organisation thumbnails and logos
        settings: Application settings
        clients: Transport client registry
        registry: Organisation configs, merged into listing records
        console: Rich console instance for formatted output
        logger: Logger instance

    """

    def __init__(
        self,
        store: ContentStore,
        organisations: OrganisationStore,
        images: ImageProvider,
        settings: AppSettings,
        clients: TransportClients,
        registry: ContentConfigRegistry | None = None,
        console: Console | None = None,
    ):
        """Initialize the deployer with its collaborators."""
        self.store = store
        self.organisations = organisations
        self.images = images
        self.settings = settings
        self.clients = clients
        self.registry = registry or ContentConfigRegistry()
        self.console = console or Console()
        self.logger = logging.getLogger(__name__)

    def deploy(
        self,
        config: ContentConfig,
        site: Site,
        environment: EnvironmentName,
        code: str | None = None,
    ) -> DeploymentResult:
        """Deploy the items of a content config to an environment.

        Every non-skipped item becomes a feed row. Items whose status
        changes are persisted, and rows before the first changed item are
        trimmed from the CSV feed so unchanged records are not re-sent.
        The spreadsheet goes to the site's content bucket and the CSV feed
        to the environment host.

        Args:
            config: Content config of the type being deployed
            site: Site the content belongs to
            environment: Target environment
            code: Restrict the run to one organisation. Defaults to None (all).

        Returns:
            DeploymentResult describing the run.

        Raises:
            ValueError: If the environment is not configured or the site has no content bucket

        """
        env = self.settings.environment(environment)
        if not site.content_bucket:
            raise ValueError(f'Site {site.id} has no content bucket')
        handler = ContentHandler.for_config(config, self.settings.working_dir, self.clients, self.console)
        handler.init_file()
        result = DeploymentResult(content_type=config.content_type, environment=environment)

        with logfire.span(
            'deploy_content',
            content_type=config.content_type.value,
            environment=environment.value,
            site=site.id,
        ):
            self.console.print(f'[step]Deploying {config.content_type.value} to {environment.value}[/step]')

            idx = 0
            start_idx = -1
            for item in self.store.list(site, config.content_type, code):
                if item.is_skipped:
                    continue

                idx += 1
                fields = self.build_record(item, config, site, env)
                if fields is None:
                    idx -= 1
                    result.excluded.append(item.code)
                    continue

                handler.append_line(handler.get_values(fields))
                result.rows += 1

                status = next_status(item.status, environment)
                if status != item.status:
                    item.status = status
                    self.store.update(item)
                    result.changed += 1
                    if start_idx < 0:
                        start_idx = idx

            result.first_changed = start_idx
            self._ship(handler, config, site, env, result)

            logfire.info(
                'Deployment complete',
                content_type=config.content_type.value,
                environment=environment.value,
                rows=result.rows,
                changed=result.changed,
                excluded=len(result.excluded),
            )

        return result

    def build_record(
        self,
        item: ContentItem,
        config: ContentConfig,
        site: Site,
        env: EnvironmentSettings,
    ) -> Fields | None:
        """Assemble the merged record of one item.

        Sources are merged most specific first: the item, the content
        config, then (for listings) the organisation config, then the
        organisation and its site record.

        Returns:
            The record, or None if the item must be left out of the feed.

        """
        fields = item.to_fields(config.default_date_pattern).add(config)

        organisation = self.organisations.get_organisation(item.code)
        organisation_site = self.organisations.get_site(site, item.code)
        if organisation is None or organisation_site is None:
            self.logger.warning(f'Excluding {item.content_type.value} {item.id}: missing organisation {item.code}')
            logfire.warn('Missing organisation', code=item.code, item=item.id)
            return None
        if organisation.has_tracking():
            fields[TRACKING] = organisation.tracking

        if item.listing:
            if organisation_site.is_archived:
                self.logger.warning(f'Excluding listing {item.id}: organisation {item.code} is archived')
                logfire.warn('Archived organisation', code=item.code, item=item.id)
                return None

            fields[PUBLISHED] = '1' if organisation_site.is_published(env.name) else '0'
            fields.add(self.registry.get(item.code))

            thumbnail = self._active_image(item.code, ImageType.THUMBNAIL)
            logo = self._active_image(item.code, ImageType.LOGO)
            if thumbnail is not None:
                fields[THUMBNAIL] = self._image_url(env, thumbnail)
                fields[THUMBNAIL_TEXT] = thumbnail.text
            if logo is not None:
                fields[IMAGE] = self._image_url(env, logo)
                fields[IMAGE_TEXT] = logo.text
            if thumbnail is None or logo is None:
                self.logger.error(
                    f'Organisation {item.code} has missing images: '
                    f'thumbnail={thumbnail is not None}, logo={logo is not None}'
                )
                logfire.error('Missing organisation images', code=item.code)

            fields.add(organisation, organisation_site)
            return fields

        thumbnail = self._active_image(item.code, ImageType.THUMBNAIL)
        if thumbnail is not None:
            fields[THUMBNAIL] = self._image_url(env, thumbnail)
            fields[THUMBNAIL_TEXT] = thumbnail.text

        image = fields.get(IMAGE)
        if image and is_relative_url(image):
            fields[IMAGE] = f'{env.images_url}{self.settings.images_path}/{image}'

        if config.trailing_slash and fields.get(URL):
            fields[URL] = ensure_trailing_slash(fields[URL])

        fields.add(organisation, organisation_site)

        # Posts from organisations without a listing carry no organisation
        if not organisation_site.listing:
            fields[ORGANISATION] = ''
            fields[IMAGE_TEXT] = ''

        return fields

    def _active_image(self, code: str, image_type: ImageType) -> ContentImage | None:
        image = self.images.get_image(code, image_type)
        return image if image is not None and image.active else None

    def _image_url(self, env: EnvironmentSettings, image: ContentImage) -> str:
        return f'{env.images_url}{image.type.path}/{image.filename}'

    def _ship(
        self,
        handler: ContentHandler,
        config: ContentConfig,
        site: Site,
        env: EnvironmentSettings,
        result: DeploymentResult,
    ) -> None:
        """Write the spreadsheet and CSV feed and copy them to their targets."""
        handler.write_file()
        try:
            result.bucket_copied = handler.copy_file_to_bucket(site.content_bucket)
        finally:
            handler.delete_file()

        handler.use_csv()
        if result.first_changed > 0:
            handler.trim_lines(result.first_changed)
        handler.convert_lines_to_ascii(config.html_fields)
        handler.write_file()

        path = f'{env.feeds_path}{self.settings.feed_path(config.content_type)}'
        try:
            handler.copy_file_to_host(path, env.name)
            result.host_copied = True
        except TransportError as e:
            self.console.print(f'[danger]Feed not delivered to {env.name.value}: {e}[/danger]')
        finally:
            handler.delete_file()
