"""Pydantic models for the content configuration tree.

One generic ContentConfig is used for every content type. Type specific
behaviour is driven by ``content_type`` and by the shared blocks composed
into it (pages, summary, output).
"""

from pydantic import BaseModel, Field

from feedsmith.models.enums import ContentType, SelectorSource
from feedsmith.models.fields import CODE, ORGANISATION, Fields
from feedsmith.models.rules import BODY, ContentField, FieldCondition, FieldFilter

# Roles a ContentFields bundle can configure, in evaluation order
FIELD_ROLES: tuple[str, ...] = (
    'title',
    'summary',
    'author',
    'author-link',
    'published-date',
    'start-date',
    'start-time',
    'end-date',
    'end-time',
    'timezone',
    'location',
    'body',
    'image',
    'background-image',
    'url',
)


class ContentFields(BaseModel):
    """Bundle of field rules applied to one block of a page.

    Attributes:
        root: Selector scoping the bundle to a part of the page
        validator: Field whose presence gates whether the bundle applies
        fields: Field rules by role

    """

    root: str | None = None
    validator: ContentField | None = None
    fields: dict[str, ContentField] = Field(default_factory=dict)

    def has(self, role: str) -> bool:
        """True if the role is present and has at least one selector."""
        field = self.fields.get(role)
        return field is not None and field.has_selectors()

    def get(self, role: str) -> ContentField | None:
        return self.fields.get(role)

    def has_validator(self) -> bool:
        return self.validator is not None and self.validator.has_selectors()

    def roles(self) -> list[str]:
        """Configured roles in evaluation order."""
        return [role for role in FIELD_ROLES if self.has(role)]


class LoadingConfig(BaseModel):
    """How a page is loaded before fields are extracted.

    Attributes:
        wait: Initial wait in milliseconds
        selector: Element to wait for
        interval: Polling interval in milliseconds
        max_wait: Maximum wait in milliseconds
        javascript: Page needs a browser to render
        scroll: Scroll the page to trigger lazy loading
        keywords: Only keep teasers containing one of these words
        anti_cache: Append a timestamp parameter to page URLs
        remove_parameters: Strip query strings from teaser URLs

    """

    wait: int = 0
    selector: str | None = None
    interval: int = 0
    max_wait: int = 0
    javascript: bool = False
    scroll: bool = False
    keywords: list[str] = Field(default_factory=list)
    anti_cache: bool = False
    remove_parameters: bool = True


class ArticleConfig(BaseModel):
    """Loading settings plus the field bundles for teasers or articles."""

    loading: LoadingConfig = Field(default_factory=LoadingConfig)
    fields: list[ContentFields] = Field(default_factory=list)

    def has_fields(self) -> bool:
        return len(self.fields) > 0


class PageConfig(BaseModel):
    """A listing page and the rules for its teasers and articles.

    Attributes:
        name: Page name
        url: Listing page URL
        browser: Browser to load the page with, if any
        base_path: Prefix for relative URLs found on the page
        more_link: Selector of the 'load more' control
        teasers: Rules for the teaser blocks on the listing
        articles: Rules for the linked article pages
        conditions: Accept/reject rules for article URLs

    """

    name: str = ''
    url: str = ''
    browser: str | None = None
    base_path: str = ''
    more_link: str | None = None
    teasers: ArticleConfig = Field(default_factory=ArticleConfig)
    articles: ArticleConfig = Field(default_factory=ArticleConfig)
    conditions: list[FieldCondition] = Field(default_factory=list)

    def accepts(self, url: str) -> bool:
        """True if the URL passes the page conditions (no conditions accepts all)."""
        return not self.conditions or FieldCondition.accept(self.conditions, url)

    def get_filters(self) -> list[FieldFilter]:
        """Body filters declared by the article bundles."""
        filters: list[FieldFilter] = []
        for bundle in self.articles.fields:
            body = bundle.get(BODY)
            if body is not None:
                filters.extend(body.filters)
        return filters


class SummaryConfig(BaseModel):
    """Limits used when a summary is derived from the body."""

    max_length: int = 0
    min_length: int = 0
    min_paragraph: int = 0


class ContentConfig(BaseModel):
    """Settings for one content type of one organisation (or the defaults).

    Attributes:
        content_type: Content type this config belongs to
        name: Display name, usually the organisation name
        filename: Output spreadsheet filename
        sheet: Worksheet name in the spreadsheet
        source: Where content items of this type come from
        default_date_pattern: Date pattern for generated dates
        trailing_slash: Append a slash to URLs in the feed
        summary: Summary length limits
        fields: Constant field values merged into every record
        output: Feed columns, header to ${field} template, in column order
        pages: Listing pages crawled for this type
        html_fields: Output columns that hold HTML markup

    """

    content_type: ContentType
    name: str = ''
    filename: str = ''
    sheet: str = 'Sheet1'
    source: SelectorSource = SelectorSource.STORE
    default_date_pattern: str = ''
    trailing_slash: bool = False
    summary: SummaryConfig = Field(default_factory=SummaryConfig)
    fields: dict[str, str] = Field(default_factory=dict)
    output: dict[str, str] = Field(default_factory=dict)
    pages: list[PageConfig] = Field(default_factory=list)
    html_fields: list[str] = Field(default_factory=lambda: [BODY])

    @property
    def code(self) -> str:
        """Organisation code held in the constant fields."""
        return self.fields.get(CODE, '')

    @property
    def headers(self) -> list[str]:
        return list(self.output.keys())

    def copy_config(self) -> 'ContentConfig':
        """Deep clone, so the copy can be specialised without touching this one."""
        return self.model_copy(deep=True)

    def get_filters(self) -> list[FieldFilter]:
        """Body filters declared by every page."""
        return [f for page in self.pages for f in page.get_filters()]

    def to_fields(self) -> Fields:
        return Fields(self.fields)


class OrganisationConfig(BaseModel):
    """All content configs of one organisation.

    Attributes:
        code: Organisation code
        name: Organisation name
        fields: Top-level string values of the organisation document
        configs: Content configs by type

    """

    code: str
    name: str = ''
    fields: dict[str, str] = Field(default_factory=dict)
    configs: dict[ContentType, ContentConfig] = Field(default_factory=dict)

    def get(self, content_type: ContentType) -> ContentConfig | None:
        return self.configs.get(content_type)

    def to_fields(self) -> Fields:
        fields = Fields(self.fields)
        fields.add({CODE: self.code, ORGANISATION: self.name})
        return fields
