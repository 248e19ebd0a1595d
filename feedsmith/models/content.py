"""Models for content items and the organisations they belong to."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from feedsmith.models.enums import ContentStatus, ContentType, EnvironmentName
from feedsmith.models.fields import CODE, ID, ORGANISATION, PUBLISHED_DATE, TITLE, URL, Fields
from feedsmith.utils.dates import format_datetime


class SiteStatus(str, Enum):
    """Status of an organisation on a site."""

    ACTIVE = 'active'
    REVIEW = 'review'
    ARCHIVED = 'archived'
    DISABLED = 'disabled'


class ImageType(str, Enum):
    """Organisation image kinds and the path segment they are served from."""

    THUMBNAIL = 'thumbnail'
    LOGO = 'logo'

    @property
    def path(self) -> str:
        return f'/{self.value}s'


class Site(BaseModel):
    """A published site and its content bucket."""

    id: str
    name: str = ''
    content_bucket: str = ''


class Organisation(BaseModel):
    """An organisation content is collected from.

    Attributes:
        code: Organisation code
        name: Display name
        tracking: Tracking parameters appended to outbound links

    """

    code: str
    name: str = ''
    tracking: str = ''

    def has_tracking(self) -> bool:
        return bool(self.tracking)

    def to_fields(self) -> Fields:
        return Fields({CODE: self.code, ORGANISATION: self.name})


class OrganisationSite(BaseModel):
    """An organisation's presence on one site.

    Attributes:
        code: Organisation code
        site_id: Site the record belongs to
        status: Listing status on the site
        listing: Whether the organisation has a listing page on the site
        fields: Extra values contributed to each record

    """

    code: str
    site_id: str
    status: SiteStatus = SiteStatus.ACTIVE
    listing: bool = True
    fields: dict[str, str] = Field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.status == SiteStatus.ACTIVE

    @property
    def is_review(self) -> bool:
        return self.status == SiteStatus.REVIEW

    @property
    def is_archived(self) -> bool:
        return self.status == SiteStatus.ARCHIVED

    def is_published(self, environment: EnvironmentName) -> bool:
        """Production shows active listings only, other environments also show reviews."""
        if environment == EnvironmentName.PROD:
            return self.is_active
        return self.is_active or self.is_review

    def to_fields(self) -> Fields:
        return Fields(self.fields)


class ContentImage(BaseModel):
    """An organisation image known to the image provider."""

    code: str
    type: ImageType
    filename: str
    text: str = ''
    active: bool = True


class ContentItem(BaseModel):
    """A crawled content item awaiting deployment.

    Attributes:
        id: Numeric item id
        code: Owning organisation code
        content_type: Type of the item
        status: Deployment status
        title: Item title
        url: Canonical URL
        published_date: Publication time, if known
        listing: Item is an organisation listing rather than an article
        values: Remaining field values by field key

    """

    id: int
    code: str
    content_type: ContentType
    status: ContentStatus = ContentStatus.NEW
    title: str = ''
    url: str = ''
    published_date: datetime | None = None
    listing: bool = False
    values: dict[str, str] = Field(default_factory=dict)

    @property
    def is_skipped(self) -> bool:
        return self.status == ContentStatus.SKIPPED

    def to_fields(self, date_pattern: str = '') -> Fields:
        """Return the item's values, rendering the published date with the pattern if given."""
        fields = Fields({ID: str(self.id), CODE: self.code, TITLE: self.title, URL: self.url})
        if self.published_date is not None:
            fields[PUBLISHED_DATE] = format_datetime(self.published_date, date_pattern)
        fields.add(self.values)
        return fields
