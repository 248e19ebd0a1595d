"""Configuration tree parsing and loading."""

from feedsmith.core.config.loader import ConfigDefaults, ContentConfigRegistry, OrganisationConfigLoader, read_yaml
from feedsmith.core.config.parser import (
    adapt_legacy_page,
    parse_content_config,
    parse_content_fields,
    parse_field,
    parse_page,
)

__all__ = [
    'ConfigDefaults',
    'ContentConfigRegistry',
    'OrganisationConfigLoader',
    'adapt_legacy_page',
    'parse_content_config',
    'parse_content_fields',
    'parse_field',
    'parse_page',
    'read_yaml',
]
