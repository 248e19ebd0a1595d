"""In-memory stores, for local runs and tests."""

from feedsmith.models.content import ContentImage, ContentItem, ImageType, Organisation, OrganisationSite, Site
from feedsmith.models.enums import ContentType


class InMemoryContentStore:
    """Content items kept in a list, in insertion order.

    Attributes:
        items: Stored items
        updates: Items passed to update(), in call order

    """

    def __init__(self, items: list[ContentItem] | None = None):
        self.items = list(items or [])
        self.updates: list[ContentItem] = []

    def list(self, site: Site, content_type: ContentType, code: str | None = None) -> list[ContentItem]:
        return [
            item
            for item in self.items
            if item.content_type == content_type and (code is None or item.code == code)
        ]

    def update(self, item: ContentItem) -> None:
        self.updates.append(item.model_copy())


class InMemoryOrganisationStore:
    """Organisations by code and organisation sites by (site, code)."""

    def __init__(
        self,
        organisations: list[Organisation] | None = None,
        sites: list[OrganisationSite] | None = None,
    ):
        self.organisations = {o.code: o for o in organisations or []}
        self.sites = {(s.site_id, s.code): s for s in sites or []}

    def get_organisation(self, code: str) -> Organisation | None:
        return self.organisations.get(code)

    def get_site(self, site: Site, code: str) -> OrganisationSite | None:
        return self.sites.get((site.id, code))


class InMemoryImageProvider:
    """Images by (code, type)."""

    def __init__(self, images: list[ContentImage] | None = None):
        self.images = {(i.code, i.type): i for i in images or []}

    def get_image(self, code: str, image_type: ImageType) -> ContentImage | None:
        return self.images.get((code, image_type))
