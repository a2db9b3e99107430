"""GitHub API client for mod releases.

Provides a lightweight REST client for listing repository releases,
selecting the release that satisfies a version constraint, fetching the
release manifest and downloading release assets.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Dict, Iterable, List, Optional

from constants import Constants
from common.errors import ManifestFetchFailed, ManifestNotFound
from common.http_client import ProgressCallback, get_json, header_value, robust_get, stream_download
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from manifest.codec import parse_manifest
from manifest.models import Manifest, Release, ReleaseAsset, Repo
from versioning import Version, compare, is_valid, parse

logger = logging.getLogger(__name__)

_NEXT_LINK_RE = re.compile(r'<([^>]+)>\s*;\s*rel="next"')


def api_headers(token: Optional[str], accept: str = "application/vnd.github+json") -> Dict[str, str]:
    """Request headers including authorization if a token is available."""
    headers = {"Accept": accept, "X-GitHub-Api-Version": "2022-11-28"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def releases_url(base_url: str, repo: Repo) -> str:
    return f"{base_url.rstrip('/')}/repos/{repo.owner}/{repo.name}/releases"


def next_link(link_header: Optional[str]) -> Optional[str]:
    """Extract the rel="next" URL from a Link header."""
    if not link_header:
        return None
    m = _NEXT_LINK_RE.search(link_header)
    return m.group(1) if m else None


def raise_for_status(repo: Optional[Repo], status: int, target: str, detail: str = "") -> None:
    """Map a non-success HTTP status onto a swizzle error."""
    if 200 <= status < 300:
        return
    if status == 404:
        raise ManifestNotFound(repo, f"{safe_url(target)} returned 404")
    raise ManifestFetchFailed(repo, detail or safe_url(target), status)


def select_release(repo: Repo, releases: Iterable[Release], constraint: Version) -> Release:
    """Pick the highest release whose tag satisfies constraint.

    Releases whose tag is not a valid version are skipped.

    Raises:
        ManifestNotFound: when no release satisfies the constraint.
    """
    best: Optional[Release] = None
    best_version: Optional[Version] = None
    for release in releases:
        if not is_valid(release.tag_name):
            continue
        candidate = parse(release.tag_name)
        if not constraint.satisfied_by(candidate):
            continue
        if best_version is None or compare(candidate, best_version) > 0:
            best, best_version = release, candidate
    if best is None:
        raise ManifestNotFound(repo, f"no release for version '{constraint.constraint_string()}'")
    return best


def latest_manifest_release(repo: Repo, releases: Iterable[Release]) -> Release:
    """Pick the highest versioned release that carries a manifest asset.

    Releases whose tag is not a version are skipped, since no constraint can
    select them again.
    """
    with_manifest = [r for r in releases if r.asset(Constants.MANIFEST_ASSET_NAME)]
    if not with_manifest:
        raise ManifestNotFound(repo, "no release carries a manifest")
    versioned = [r for r in with_manifest if is_valid(r.tag_name)]
    if not versioned:
        raise ManifestNotFound(repo, "no versioned release carries a manifest")
    return max(versioned, key=lambda r: parse(r.tag_name))


def manifest_asset(repo: Repo, release: Release) -> ReleaseAsset:
    asset = release.asset(Constants.MANIFEST_ASSET_NAME)
    if asset is None or not asset.download_url:
        raise ManifestNotFound(repo, f"release '{release.tag_name}' has no {Constants.MANIFEST_ASSET_NAME} asset")
    return asset


def build_manifest(repo: Repo, release: Release, data: str) -> Manifest:
    """Parse manifest data fetched from release and bind it to repo and tag."""
    manifest = parse_manifest(data)
    manifest.repo = repo
    manifest.version = release.tag_name
    manifest.attach_assets(release)
    return manifest


class GitHubClient:
    """Lightweight REST client for GitHub release operations.

    Supports optional authentication via GITHUB_TOKEN environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize GitHub client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub token (defaults to GITHUB_TOKEN env var)
        """
        self.base_url = base_url or Constants.GITHUB_API_BASE
        self.token = token or os.environ.get(Constants.ENV_GITHUB_TOKEN)

    def _get_headers(self, accept: str = "application/vnd.github+json") -> Dict[str, str]:
        return api_headers(self.token, accept)

    def list_releases(self, repo: str) -> List[Release]:
        """Fetch every release of repo, following pagination.

        Args:
            repo: Repository in owner/name form

        Returns:
            List of releases, newest first as returned by the API
        """
        repo = Repo(repo)
        url: Optional[str] = f"{releases_url(self.base_url, repo)}?per_page={Constants.REPO_API_PER_PAGE}"
        releases: List[Release] = []
        while url:
            status, headers, data = get_json(url, headers=self._get_headers())
            raise_for_status(repo, status, url)
            if not isinstance(data, list):
                raise ManifestFetchFailed(repo, f"unexpected releases payload from {safe_url(url)}", status)
            releases.extend(Release.from_api(item) for item in data if isinstance(item, dict))
            url = next_link(header_value(headers, "Link"))
        if is_debug_enabled(logger):
            logger.debug(
                "Listed releases",
                extra=extra_context(
                    event="releases",
                    component="github",
                    action="list_releases",
                    target=str(repo),
                    count=len(releases)
                )
            )
        return releases

    def find_release(self, repo: str, constraint: Version) -> Release:
        """Return the highest release satisfying constraint."""
        repo = Repo(repo)
        return select_release(repo, self.list_releases(repo), constraint)

    def manifest_from_release(self, repo: str, release: Release) -> Manifest:
        """Download and parse the manifest asset of release."""
        repo = Repo(repo)
        asset = manifest_asset(repo, release)
        status, _, text = robust_get(asset.download_url, headers=self._get_headers("application/octet-stream"))
        raise_for_status(repo, status, asset.download_url, text if status == 0 else "")
        return build_manifest(repo, release, text)

    def fetch_manifest(self, repo: str, constraint: Version) -> Manifest:
        """Fetch the manifest of the newest release of repo satisfying constraint.

        Raises:
            ManifestNotFound: no matching release, or it has no manifest asset
            ManifestFetchFailed: transport failure or unexpected status
            ManifestParseFailed: manifest content is neither YAML nor JSON
        """
        repo = Repo(repo)
        release = self.find_release(repo, constraint)
        logger.info("Fetching manifest for %s %s", repo, release.tag_name)
        return self.manifest_from_release(repo, release)

    def latest_manifest(self, repo: str) -> Manifest:
        """Fetch the manifest of the newest release that publishes one."""
        repo = Repo(repo)
        release = latest_manifest_release(repo, self.list_releases(repo))
        return self.manifest_from_release(repo, release)

    def download_asset(
        self,
        asset: ReleaseAsset,
        path: str,
        progress: Optional[ProgressCallback] = None,
        repo: Optional[str] = None,
    ) -> int:
        """Stream asset to path.

        Returns:
            Number of bytes written
        """
        status, written = stream_download(
            asset.download_url,
            path,
            headers=self._get_headers("application/octet-stream"),
            progress=progress,
        )
        raise_for_status(Repo(repo) if repo else None, status, asset.download_url)
        return written
