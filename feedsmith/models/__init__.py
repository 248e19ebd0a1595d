"""Pydantic models for rules, configuration, content and results."""

from feedsmith.models.config import (
    FIELD_ROLES,
    ArticleConfig,
    ContentConfig,
    ContentFields,
    LoadingConfig,
    OrganisationConfig,
    PageConfig,
    SummaryConfig,
)
from feedsmith.models.content import (
    ContentImage,
    ContentItem,
    ImageType,
    Organisation,
    OrganisationSite,
    Site,
    SiteStatus,
)
from feedsmith.models.enums import (
    ConditionAction,
    ContentStatus,
    ContentType,
    EnvironmentName,
    FilterResult,
    FilterScope,
    MatchType,
    SelectorSource,
    TextCase,
)
from feedsmith.models.fields import Fields, FieldSource, merge
from feedsmith.models.results import DeploymentResult, ExtractionResult, FieldResult
from feedsmith.models.rules import (
    ContentField,
    FieldCondition,
    FieldExclude,
    FieldExtractor,
    FieldFilter,
    FieldSelector,
)

__all__ = [
    'FIELD_ROLES',
    'ArticleConfig',
    'ConditionAction',
    'ContentConfig',
    'ContentField',
    'ContentFields',
    'ContentImage',
    'ContentItem',
    'ContentStatus',
    'ContentType',
    'DeploymentResult',
    'EnvironmentName',
    'ExtractionResult',
    'FieldCondition',
    'FieldExclude',
    'FieldExtractor',
    'FieldFilter',
    'FieldResult',
    'FieldSelector',
    'FieldSource',
    'Fields',
    'FilterResult',
    'FilterScope',
    'ImageType',
    'LoadingConfig',
    'MatchType',
    'Organisation',
    'OrganisationConfig',
    'OrganisationSite',
    'PageConfig',
    'SelectorSource',
    'Site',
    'SiteStatus',
    'SummaryConfig',
    'TextCase',
    'merge',
]
