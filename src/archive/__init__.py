"""Release archive handling."""

from .base import Archive, ArchiveFormat, UnknownArchive, archive_path, new_archive, sanitize_name
from .install import install_release_files

__all__ = [
    "Archive",
    "ArchiveFormat",
    "UnknownArchive",
    "archive_path",
    "install_release_files",
    "new_archive",
    "sanitize_name",
]
