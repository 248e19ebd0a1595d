"""Feed file handling."""

from feedsmith.core.output.handler import ContentHandler

__all__ = ['ContentHandler']
