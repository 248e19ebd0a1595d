"""Custom exceptions for feedsmith."""


class FeedsmithError(Exception):
    """Base class for all feedsmith exceptions."""

    pass


class ConfigurationError(FeedsmithError):
    """Raised when a configuration document is malformed."""

    def __init__(self, source: str, key: str, message: str):
        """Initialize configuration error.

        Args:
            source: Document or block the error was found in
            key: Configuration key holding the bad value
            message: Description of the problem

        """
        self.source = source
        self.key = key
        self.message = message
        super().__init__(f"Invalid configuration in '{source}' for key '{key}': {message}")


class DefaultsNotInitializedError(FeedsmithError):
    """Raised when organisation config is parsed before the defaults were loaded."""

    def __init__(self, filename: str):
        """Initialize defaults error.

        Args:
            filename: Name of the defaults document that was expected

        """
        self.filename = filename
        super().__init__(f'Content defaults not initialized: load {filename} before parsing organisation configs')


class DateParseError(FeedsmithError):
    """Raised when no configured date pattern matches a field value."""

    def __init__(self, field_name: str, value: str, patterns: list[str]):
        """Initialize date parse error.

        Args:
            field_name: Name of the field being parsed
            value: Text that failed to parse
            patterns: Date patterns that were attempted, in order

        """
        self.field_name = field_name
        self.value = value
        self.patterns = patterns
        super().__init__(f"Unable to parse date for '{field_name}' from '{value}': tried {', '.join(patterns)}")


class TransportError(FeedsmithError):
    """Raised when copying a feed file to a remote target fails."""

    def __init__(self, target: str, operation: str, reason: str):
        """Initialize transport error.

        Args:
            target: Host, bucket or directory that was addressed
            operation: Operation that failed (e.g. 'put', 'delete')
            reason: Underlying failure message

        """
        self.target = target
        self.operation = operation
        self.reason = reason
        super().__init__(f'Transport {operation} failed for {target}: {reason}')
