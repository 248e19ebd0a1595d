"""Interfaces of the stores the deployment reads from and writes to."""

from typing import Protocol

from feedsmith.models.content import ContentImage, ContentItem, ImageType, Organisation, OrganisationSite, Site
from feedsmith.models.enums import ContentType


class ContentStore(Protocol):
    """Persistent content items."""

    def list(self, site: Site, content_type: ContentType, code: str | None = None) -> list[ContentItem]:
        """Items of a type on a site, optionally for one organisation, in feed order."""
        ...

    def update(self, item: ContentItem) -> None:
        """Persist a changed item."""
        ...


class OrganisationStore(Protocol):
    """Organisations and their per-site records."""

    def get_organisation(self, code: str) -> Organisation | None: ...

    def get_site(self, site: Site, code: str) -> OrganisationSite | None: ...


class ImageProvider(Protocol):
    """Organisation thumbnails and logos."""

    def get_image(self, code: str, image_type: ImageType) -> ContentImage | None: ...
