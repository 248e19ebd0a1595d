"""Utility functions for file and directory management in feedsmith."""

import os
import tempfile
from collections.abc import Callable
from pathlib import Path


def get_project_root() -> Path:
    """Find the project root by searching upwards from the Current Working Directory.

    Stops at the first directory containing a marker file.
    """
    current_path = Path.cwd()

    markers = {'.git', 'pyproject.toml', '.feedsmith', 'requirements.txt'}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in markers):
            return parent

    # No markers found (e.g. running in /tmp)
    return current_path


def get_logs_path() -> Path:
    """Return the path to the logs directory in .feedsmith."""
    root = get_project_root()
    return root / '.feedsmith' / 'logs'


def get_work_path() -> Path:
    """Return the path to the feed staging directory in .feedsmith."""
    root = get_project_root()
    return root / '.feedsmith' / 'work'


def init_feedsmith() -> Path:
    """Initialize the .feedsmith directory and return the staging path."""
    root = get_project_root()
    feedsmith_dir = root / '.feedsmith'
    work_dir = feedsmith_dir / 'work'
    logs_dir = feedsmith_dir / 'logs'

    work_dir.mkdir(parents=True, exist_ok=True)
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Keep generated feeds and logs out of source control
    gitignore = feedsmith_dir / '.gitignore'
    if not gitignore.exists():
        gitignore.write_text('# Automatically created by feedsmith\n*\n')

    return work_dir


def atomic_write(path: Path, writer: Callable[[Path], None]) -> Path:
    """Write a file through a temporary sibling and rename it into place.

    The writer is given the temporary path and must create the file there.
    Readers of ``path`` never observe a partially written file.

    Args:
        path: Final location of the file
        writer: Callable that writes the full contents to the path it receives

    Returns:
        The final path.

    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f'.{path.stem}.', suffix=f'.tmp{path.suffix}', dir=path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        writer(tmp_path)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    return path
