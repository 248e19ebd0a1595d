"""Store interfaces and in-memory implementations."""

from feedsmith.storage.base import ContentStore, ImageProvider, OrganisationStore
from feedsmith.storage.memory import InMemoryContentStore, InMemoryImageProvider, InMemoryOrganisationStore

__all__ = [
    'ContentStore',
    'ImageProvider',
    'InMemoryContentStore',
    'InMemoryImageProvider',
    'InMemoryOrganisationStore',
    'OrganisationStore',
]
