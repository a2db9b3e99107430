"""Download and unpack the release files of a manifest."""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from common.errors import MissingAsset, NilManifest
from common.http_client import ProgressCallback
from manifest.models import Manifest
from .base import archive_path, new_archive

logger = logging.getLogger(__name__)


def _log_progress(name: str) -> ProgressCallback:
    last = {"pct": -1}

    def report(done: int, total: int) -> None:
        if not total:
            return
        pct = int(100 * done / total)
        if pct // 10 != last["pct"] // 10:
            last["pct"] = pct
            logger.info("%s: %d%% of %d bytes", name, pct, total)

    return report


def install_release_files(
    manifest: Optional[Manifest],
    client,
    download_dir: str,
    game_dir: str,
    progress: Optional[ProgressCallback] = None,
) -> List[str]:
    """Download every release file of manifest and unpack it into game_dir.

    Each file is unpacked into game_dir/destination with its source prefix
    stripped. client must provide download_asset(asset, path, progress, repo).

    Returns:
        Paths of the downloaded archives

    Raises:
        NilManifest: manifest is None
        MissingAsset: a release file has no release asset to download
    """
    if manifest is None:
        raise NilManifest()

    os.makedirs(download_dir, exist_ok=True)
    archives = []
    for release_file in manifest.files:
        asset = release_file.asset
        if asset is None or not asset.download_url:
            raise MissingAsset(manifest.repo, release_file.name)

        path = archive_path(
            f"{manifest.repo.name}-{manifest.version}",
            download_dir,
            asset.download_url,
        )
        logger.info("Downloading %s from %s", release_file.name, manifest.repo)
        client.download_asset(
            asset,
            path,
            progress=progress or _log_progress(release_file.name),
            repo=manifest.repo,
        )

        target = os.path.join(game_dir, release_file.destination) if release_file.destination else game_dir
        new_archive(path).unpack(target, release_file.source)
        archives.append(path)
    return archives
