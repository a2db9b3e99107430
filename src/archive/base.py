"""Archive abstraction and extension-based dispatch."""

from __future__ import annotations

import logging
import os
import posixpath
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from common.errors import ArchiveError, UnknownArchiveFormat

logger = logging.getLogger(__name__)


class ArchiveFormat(Enum):
    """Archive formats, keyed by file extension."""
    ZIP = ".zip"
    SEVEN_ZIP = ".7z"
    UNKNOWN = ""


class Archive(ABC):
    """An archive file on disk that can be unpacked into a folder."""

    format = ArchiveFormat.UNKNOWN

    def __init__(self, location: str):
        self.location = os.path.normpath(location)

    @abstractmethod
    def unpack(self, destination: str, source_prefix: str = "") -> int:
        """Extract members under source_prefix into destination, stripping the prefix.

        Returns:
            Number of files written
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location!r})"


class UnknownArchive(Archive):
    """An archive whose format cannot be identified; unpacking always fails."""

    def unpack(self, destination: str, source_prefix: str = "") -> int:
        raise UnknownArchiveFormat(self.location)


def detect_format(path: str) -> ArchiveFormat:
    lower = path.lower()
    for fmt in (ArchiveFormat.ZIP, ArchiveFormat.SEVEN_ZIP):
        if lower.endswith(fmt.value):
            return fmt
    return ArchiveFormat.UNKNOWN


def new_archive(path: str) -> Archive:
    """Return the Archive implementation matching the extension of path."""
    fmt = detect_format(path)
    if fmt is ArchiveFormat.ZIP:
        from .ziparchive import ZipArchive  # pylint: disable=import-outside-toplevel
        return ZipArchive(path)
    if fmt is ArchiveFormat.SEVEN_ZIP:
        from .sevenz import SevenZArchive  # pylint: disable=import-outside-toplevel
        return SevenZArchive(path)
    logger.warning("Unknown archive format: %s", path)
    return UnknownArchive(path)


def sanitize_name(name: str) -> str:
    """Replace spaces and path separators so name is a safe file name part."""
    return name.replace(" ", "-").replace("/", "-").replace("\\", "-")


def archive_path(name: str, directory: str, url: str, now: Optional[float] = None) -> str:
    """Download location {directory}/{unix time}-{name}-{url basename}."""
    stamp = int(time.time() if now is None else now)
    filename = url.rstrip("/").split("/")[-1]
    return os.path.join(directory, f"{stamp}-{sanitize_name(name)}-{filename}")


def member_target(destination: str, member: str, source_prefix: str) -> Optional[str]:
    """Map an archive member name to its extraction path.

    Returns None for members outside source_prefix (or the prefix folder
    itself).

    Raises:
        ArchiveError: when the member would land outside destination.
    """
    name = member.replace("\\", "/")
    prefix = source_prefix.replace("\\", "/").strip("/")
    if prefix:
        if name.rstrip("/") == prefix or not name.startswith(prefix + "/"):
            return None
        name = name[len(prefix) + 1:]
    name = posixpath.normpath(name) if name.strip("/") else ""
    if not name or name == ".":
        return None

    root = os.path.abspath(destination)
    target = os.path.abspath(os.path.join(root, *name.split("/")))
    if target != root and not target.startswith(root + os.sep):
        raise ArchiveError(f"invalid file path in archive: {member}")
    return target
