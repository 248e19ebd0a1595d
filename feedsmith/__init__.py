"""feedsmith - Rule-driven field extraction and content feed deployment.

Configure once per organisation, deploy every feed from the same rules.
"""

from feedsmith.core.config import ConfigDefaults, ContentConfigRegistry, OrganisationConfigLoader
from feedsmith.core.deployment import ContentDeployer, next_status
from feedsmith.core.extraction import ContentFieldsEvaluator, DocumentContext, FieldEvaluator
from feedsmith.core.output import ContentHandler
from feedsmith.core.pipeline import Pipeline
from feedsmith.core.transport import BucketClient, HostClient, TransportClients
from feedsmith.exceptions import (
    ConfigurationError,
    DateParseError,
    DefaultsNotInitializedError,
    FeedsmithError,
    TransportError,
)
from feedsmith.models import ContentConfig, ContentField, ContentFields, Fields
from feedsmith.settings import AppSettings, EnvironmentSettings, TransportSettings
from feedsmith.utils import init_feedsmith

__all__ = [
    # Configuration
    'ConfigDefaults',
    'ContentConfigRegistry',
    'OrganisationConfigLoader',
    'ContentConfig',
    'ContentField',
    'ContentFields',
    # Extraction
    'ContentFieldsEvaluator',
    'DocumentContext',
    'FieldEvaluator',
    'Fields',
    # Deployment
    'ContentDeployer',
    'ContentHandler',
    'Pipeline',
    'next_status',
    # Transport
    'BucketClient',
    'HostClient',
    'TransportClients',
    # Settings
    'AppSettings',
    'EnvironmentSettings',
    'TransportSettings',
    # Errors
    'ConfigurationError',
    'DateParseError',
    'DefaultsNotInitializedError',
    'FeedsmithError',
    'TransportError',
    # Utilities
    'init_feedsmith',
]
