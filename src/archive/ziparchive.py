"""Zip archive support."""

from __future__ import annotations

import logging
import os
import shutil
import zipfile

from common.errors import ArchiveError
from .base import Archive, ArchiveFormat, member_target

logger = logging.getLogger(__name__)


class ZipArchive(Archive):
    """A .zip archive."""

    format = ArchiveFormat.ZIP

    def unpack(self, destination: str, source_prefix: str = "") -> int:
        written = 0
        try:
            with zipfile.ZipFile(self.location) as zf:
                for info in zf.infolist():
                    target = member_target(destination, info.filename, source_prefix)
                    if target is None:
                        continue
                    if info.is_dir():
                        os.makedirs(target, exist_ok=True)
                        continue
                    os.makedirs(os.path.dirname(target), exist_ok=True)
                    with zf.open(info) as src, open(target, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    written += 1
        except (zipfile.BadZipFile, OSError) as exc:
            raise ArchiveError(f"failed to unpack {self.location}: {exc}") from exc
        logger.info("Unpacked %d files from %s", written, self.location)
        return written
