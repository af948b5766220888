from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Protocol

from loguru import logger


class PathKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


def get_or_create_path(location: str, permissions: int, is_directory: bool) -> None:
    """Create ``location`` (and its missing parents) unless something already lives there."""
    if os.path.exists(location):
        return
    dir_path = location if is_directory else os.path.dirname(location)
    if dir_path:
        os.makedirs(dir_path, mode=permissions, exist_ok=True)
    if not is_directory:
        Path(location).touch()
    logger.debug("Created {} {}", "directory" if is_directory else "file", location)


class PathEnsurer(Protocol):
    def ensure(self, location: str, kind: PathKind, permissions: int) -> None:
        ...


class LocalPathEnsurer:
    """Ensures paths on the real filesystem."""

    def ensure(self, location: str, kind: PathKind, permissions: int) -> None:
        get_or_create_path(location, permissions, kind is PathKind.DIRECTORY)


class MemoryPathEnsurer:
    """In-memory stand-in for :class:`LocalPathEnsurer`; nothing touches disk."""

    def __init__(self) -> None:
        self.entries: Dict[str, PathKind] = {}
        self.permissions: Dict[str, int] = {}

    def ensure(self, location: str, kind: PathKind, permissions: int) -> None:
        location = os.path.normpath(location)
        if location in self.entries:
            return
        parent = location if kind is PathKind.DIRECTORY else os.path.dirname(location)
        while parent and parent not in (os.sep, os.curdir) and parent not in self.entries:
            self.entries[parent] = PathKind.DIRECTORY
            self.permissions[parent] = permissions
            parent = os.path.dirname(parent)
        if kind is PathKind.FILE:
            self.entries[location] = PathKind.FILE
            self.permissions[location] = permissions

    def exists(self, location: str) -> bool:
        return os.path.normpath(location) in self.entries

    def kind_of(self, location: str) -> Optional[PathKind]:
        return self.entries.get(os.path.normpath(location))
