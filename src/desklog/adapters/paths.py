"""Filesystem collaborators: app-data resolution and directory creation."""

import asyncio
from pathlib import Path

from platformdirs import user_data_dir

from desklog.core.errors import DirectoryCreationError


def resolve_app_data_dir(app_name: str) -> Path:
    """Return the per-user writable data directory for an application."""
    return Path(user_data_dir(app_name, appauthor=False))


def _mkdir(path: Path) -> None:
    """Create path, raising DirectoryCreationError unless it already exists."""
    try:
        path.mkdir(parents=True)
    except FileExistsError as exc:
        # A regular file occupying the path is not "already exists"
        if not path.is_dir():
            raise DirectoryCreationError(path, exc) from exc
    except OSError as exc:
        raise DirectoryCreationError(path, exc) from exc


async def create_directory(path: Path) -> None:
    """Create a directory, treating "already exists" as success.

    Raises:
        DirectoryCreationError: If the directory is missing and cannot be created.
    """
    await asyncio.to_thread(_mkdir, path)
