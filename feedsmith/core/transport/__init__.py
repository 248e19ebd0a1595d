"""Transport client interfaces and registry."""

from feedsmith.core.transport.base import BucketClient, HostClient
from feedsmith.core.transport.clients import TransportClients

__all__ = ['BucketClient', 'HostClient', 'TransportClients']
