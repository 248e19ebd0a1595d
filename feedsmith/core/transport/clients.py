"""Process-scoped registry of transport clients."""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import logfire

from feedsmith.core.transport.base import BucketClient, HostClient
from feedsmith.models.enums import EnvironmentName
from feedsmith.settings import TransportSettings

BUCKET_KEY = 'bucket'


class TransportClients:
    """Lazily created clients, one per environment, each behind its own lock.

    Deployment runs hold the lock of their target while they use a client,
    so concurrent runs against the same environment never interleave writes.

    Attributes:
        settings: Timeouts and retry limits for transport calls
        logger: Logger instance

    """

    def __init__(
        self,
        bucket_factory: Callable[[], BucketClient],
        host_factory: Callable[[EnvironmentName], HostClient],
        settings: TransportSettings | None = None,
    ):
        """Initialize the registry.

        Args:
            bucket_factory: Creates the object storage client
            host_factory: Creates the host client for an environment
            settings: Transport settings. Defaults to None (uses TransportSettings()).

        """
        self.settings = settings or TransportSettings()
        self.logger = logging.getLogger(__name__)
        self._bucket_factory = bucket_factory
        self._host_factory = host_factory
        self._bucket: BucketClient | None = None
        self._hosts: dict[EnvironmentName, HostClient] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    @contextmanager
    def bucket(self) -> Iterator[BucketClient]:
        """Hold the bucket lock and yield the bucket client."""
        with self._lock_for(BUCKET_KEY):
            if self._bucket is None:
                self.logger.info('Creating bucket client')
                self._bucket = self._bucket_factory()
            yield self._bucket

    @contextmanager
    def host(self, environment: EnvironmentName) -> Iterator[HostClient]:
        """Hold the environment lock and yield a connected host client."""
        with self._lock_for(environment.value):
            client = self._hosts.get(environment)
            if client is None:
                self.logger.info(f'Creating host client for {environment.value}')
                client = self._host_factory(environment)
                self._hosts[environment] = client
            if not client.is_connected():
                with logfire.span('connect_host', environment=environment.value):
                    client.connect(self.settings.timeout)
            yield client

    def close_all(self) -> None:
        """Close every client created so far."""
        with self._registry_lock:
            clients: list[BucketClient | HostClient] = list(self._hosts.values())
            if self._bucket is not None:
                clients.append(self._bucket)
            self._hosts.clear()
            self._bucket = None

        for client in clients:
            try:
                client.close()
            except OSError as e:
                self.logger.warning(f'Error closing transport client: {e}')
