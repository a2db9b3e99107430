"""7z archive support backed by py7zr."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile

import py7zr
from py7zr.exceptions import ArchiveError as SevenZipError

from common.errors import ArchiveError
from .base import Archive, ArchiveFormat, member_target

logger = logging.getLogger(__name__)


class SevenZArchive(Archive):
    """A .7z archive.

    Members are extracted to a scratch folder first, then moved into place
    with the source prefix stripped.
    """

    format = ArchiveFormat.SEVEN_ZIP

    def unpack(self, destination: str, source_prefix: str = "") -> int:
        written = 0
        try:
            with py7zr.SevenZipFile(self.location, mode="r") as archive:
                entries = archive.list()
                targets = {
                    entry.filename: member_target(destination, entry.filename, source_prefix)
                    for entry in entries
                }
                with tempfile.TemporaryDirectory(prefix="swizzle-7z-") as scratch:
                    archive.extractall(path=scratch)
                    for entry in entries:
                        target = targets[entry.filename]
                        if target is None:
                            continue
                        if entry.is_directory:
                            os.makedirs(target, exist_ok=True)
                            continue
                        os.makedirs(os.path.dirname(target), exist_ok=True)
                        shutil.copyfile(os.path.join(scratch, *entry.filename.replace("\\", "/").split("/")), target)
                        written += 1
        except (SevenZipError, OSError) as exc:
            raise ArchiveError(f"failed to unpack {self.location}: {exc}") from exc
        logger.info("Unpacked %d files from %s", written, self.location)
        return written
