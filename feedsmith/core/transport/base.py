"""Interfaces for the remote targets feed files are shipped to.

Concrete S3 and SSH clients live outside this package and are injected
through TransportClients.
"""

from pathlib import Path
from typing import Protocol


class BucketClient(Protocol):
    """Object storage client (e.g. an S3 wrapper)."""

    def put_object(self, bucket: str, key: str, path: Path, timeout: float) -> None:
        """Upload a local file as bucket/key."""
        ...

    def get_object(self, bucket: str, key: str, path: Path, timeout: float) -> None:
        """Download bucket/key to a local file."""
        ...

    def close(self) -> None: ...


class HostClient(Protocol):
    """Remote host client (e.g. an SFTP session)."""

    def is_connected(self) -> bool: ...

    def connect(self, timeout: float) -> None:
        """Open (or reopen) the session."""
        ...

    def put(self, path: Path, directory: str, timeout: float) -> None:
        """Upload a local file into a remote directory."""
        ...

    def delete(self, remote_path: str, timeout: float) -> None:
        """Remove a remote file."""
        ...

    def close(self) -> None: ...
