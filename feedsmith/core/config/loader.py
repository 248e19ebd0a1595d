"""Loading of content configuration documents from a directory."""

import logging
from pathlib import Path
from typing import Any, ClassVar

import logfire
import yaml
from rich.console import Console

from feedsmith.core.config.parser import parse_content_config
from feedsmith.exceptions import ConfigurationError, DefaultsNotInitializedError
from feedsmith.models.config import ContentConfig, OrganisationConfig
from feedsmith.models.enums import ContentType


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML document that must hold a map at the top level.

    Args:
        path: Document to read

    Returns:
        The parsed map (empty for an empty document).

    Raises:
        ConfigurationError: If the file is not valid YAML or not a map

    """
    try:
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(path.name, '', f'invalid YAML: {e}') from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(path.name, '', f'expected a map at the top level, got {type(data).__name__}')
    return data


def parse_content_types(raw: dict[str, Any], source: str, base: dict[ContentType, ContentConfig]) -> dict:
    """Parse every content type block present in a document."""
    configs = {}
    for content_type in ContentType:
        if content_type.value in raw:
            configs[content_type] = parse_content_config(
                content_type, raw[content_type.value], source, base.get(content_type)
            )
    return configs


class ConfigDefaults:
    """Global content defaults, loaded once per process.

    Configs handed out are deep copies, so callers may specialise them
    freely without changing the defaults.

    Attributes:
        FILENAME: Name of the defaults document
        console: Rich console instance for formatted output
        logger: Logger instance

    """

    FILENAME: ClassVar[str] = 'content.yml'

    def __init__(self, console: Console | None = None):
        """Initialize empty, unloaded defaults.

        Args:
            console: Rich console instance for formatted output. Defaults to None (creates new Console).

        """
        self.console = console or Console()
        self.logger = logging.getLogger(__name__)
        self._configs: dict[ContentType, ContentConfig] | None = None

    @property
    def loaded(self) -> bool:
        return self._configs is not None

    def load(self, directory: Path) -> 'ConfigDefaults':
        """Read the defaults document from a directory.

        Loading is a no-op once the defaults have been loaded.

        Args:
            directory: Directory holding content.yml

        Returns:
            self

        """
        if self.loaded:
            self.logger.debug('Content defaults already loaded, ignoring %s', directory)
            return self

        path = Path(directory) / self.FILENAME
        with logfire.span('load_defaults', path=str(path)):
            raw = read_yaml(path)
            self.load_map(raw, source=self.FILENAME)
            self.console.print(f'  [info]↻ Loaded content defaults for {len(self._configs)} types[/info]')
        return self

    def load_map(self, raw: dict[str, Any], source: str = FILENAME) -> 'ConfigDefaults':
        """Parse already-read defaults. Ignored once loaded."""
        if self.loaded:
            return self
        self._configs = parse_content_types(raw, source, {})
        self.logger.info(f'Loaded content defaults for types: {[t.value for t in self._configs]}')
        return self

    def get(self, content_type: ContentType) -> ContentConfig | None:
        """Return a copy of the default config for a type.

        Raises:
            DefaultsNotInitializedError: If the defaults were never loaded

        """
        if self._configs is None:
            raise DefaultsNotInitializedError(self.FILENAME)
        config = self._configs.get(content_type)
        return config.copy_config() if config is not None else None

    def all(self) -> dict[ContentType, ContentConfig]:
        if self._configs is None:
            raise DefaultsNotInitializedError(self.FILENAME)
        return {content_type: config.copy_config() for content_type, config in self._configs.items()}


class OrganisationConfigLoader:
    """Builds organisation configs from their documents over the defaults.

    Attributes:
        defaults: Loaded global defaults
        directory: Directory holding the organisation documents
        console: Rich console instance for formatted output
        logger: Logger instance

    """

    def __init__(self, defaults: ConfigDefaults, directory: Path, console: Console | None = None):
        """Initialize the loader.

        Args:
            defaults: Global defaults every organisation config starts from
            directory: Directory holding the organisation documents
            console: Rich console instance for formatted output. Defaults to None (creates new Console).

        """
        self.defaults = defaults
        self.directory = Path(directory)
        self.console = console or Console()
        self.logger = logging.getLogger(__name__)

    def load(self, filename: str) -> OrganisationConfig:
        """Read and parse one organisation document."""
        path = self.directory / filename
        with logfire.span('load_organisation', path=str(path)):
            return self.parse(read_yaml(path), source=filename)

    def parse(self, raw: dict[str, Any], source: str) -> OrganisationConfig:
        """Parse an organisation document.

        Each content type block is overlaid on a copy of the type's
        defaults, after the organisation's top-level string values have
        been written into the copy's constant fields.

        Args:
            raw: Organisation document
            source: Document name for error messages

        Returns:
            The organisation config.

        Raises:
            ConfigurationError: If the document has no code
            DefaultsNotInitializedError: If the defaults were never loaded

        """
        org_fields = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        code = org_fields.get('code')
        if not code:
            raise ConfigurationError(source, 'code', 'organisation document has no code')
        name = org_fields.get('organisation') or org_fields.get('name') or ''

        configs = {}
        for content_type in ContentType:
            if content_type.value not in raw:
                continue
            base = self.defaults.get(content_type)
            if base is None:
                self.logger.warning(f'No defaults for {content_type.value}, using an empty config for {code}')
                base = ContentConfig(content_type=content_type)
            base.fields.update(org_fields)
            config = parse_content_config(content_type, raw[content_type.value], source, base)
            if not config.name:
                config.name = name
            configs[content_type] = config

        self.logger.info(f'Loaded organisation {code} with types: {[t.value for t in configs]}')
        return OrganisationConfig(code=code, name=name, fields=org_fields, configs=configs)

    def load_all(self) -> list[OrganisationConfig]:
        """Load every organisation document in the directory, sorted by filename."""
        organisations = []
        for path in sorted(self.directory.glob('*.yml')):
            if path.name == ConfigDefaults.FILENAME:
                continue
            organisations.append(self.load(path.name))
        self.console.print(f'  [info]↻ Loaded {len(organisations)} organisation configs[/info]')
        return organisations


class ContentConfigRegistry:
    """Organisation configs indexed by code, name and content type."""

    def __init__(self):
        self._by_code: dict[str, OrganisationConfig] = {}
        self._by_name: dict[str, OrganisationConfig] = {}
        self._by_type: dict[ContentType, dict[str, ContentConfig]] = {}

    def __len__(self) -> int:
        return len(self._by_code)

    def load(self, organisations: list[OrganisationConfig]) -> 'ContentConfigRegistry':
        """Replace the registry contents."""
        self._by_code.clear()
        self._by_name.clear()
        self._by_type.clear()
        for organisation in organisations:
            self.set(organisation)
        return self

    def set(self, organisation: OrganisationConfig) -> None:
        """Add or replace one organisation."""
        previous = self._by_code.get(organisation.code)
        if previous is not None:
            self._by_name.pop(previous.name, None)
            for configs in self._by_type.values():
                configs.pop(previous.code, None)

        self._by_code[organisation.code] = organisation
        if organisation.name:
            self._by_name[organisation.name] = organisation
        for content_type, config in organisation.configs.items():
            self._by_type.setdefault(content_type, {})[organisation.code] = config

    def get(self, code: str) -> OrganisationConfig | None:
        return self._by_code.get(code)

    def get_by_name(self, name: str) -> OrganisationConfig | None:
        return self._by_name.get(name)

    def by_type(self, content_type: ContentType) -> list[ContentConfig]:
        """Configs of one type, in registration order."""
        return list(self._by_type.get(content_type, {}).values())
