"""Async GitHub release client used for concurrent dependency resolution."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from constants import Constants
from common.errors import ManifestFetchFailed
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from manifest.models import Manifest, Release, Repo
from versioning import Version
from .github import api_headers, build_manifest, manifest_asset, next_link, raise_for_status, releases_url, select_release

logger = logging.getLogger(__name__)


class AsyncGitHubClient:
    """aiohttp-based counterpart of GitHubClient.

    Use as an async context manager, or call start()/stop() explicitly.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub token (defaults to GITHUB_TOKEN env var)
            timeout: Request timeout in seconds (defaults to Constants.REQUEST_TIMEOUT)
        """
        self.base_url = base_url or Constants.GITHUB_API_BASE
        self.token = token or os.environ.get(Constants.ENV_GITHUB_TOKEN)
        self._timeout = aiohttp.ClientTimeout(total=timeout or Constants.REQUEST_TIMEOUT)
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            connector = aiohttp.TCPConnector(limit=Constants.MAX_CONCURRENCY)
            self._session = aiohttp.ClientSession(timeout=self._timeout, connector=connector)

    async def stop(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AsyncGitHubClient":
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def _get(self, repo: Repo, url: str, accept: str) -> Tuple[int, Dict[str, str], str]:
        if self._session is None:
            await self.start()
        assert self._session is not None
        with Timer() as t:
            try:
                async with self._session.get(url, headers=api_headers(self.token, accept)) as response:
                    body = await response.text()
                    status, headers = response.status, dict(response.headers)
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                raise ManifestFetchFailed(repo, f"{safe_url(url)}: {exc}") from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="github_async",
                    action="GET",
                    status_code=status,
                    duration_ms=t.duration_ms(),
                    target=safe_url(url)
                )
            )
        return status, headers, body

    async def list_releases(self, repo: str) -> List[Release]:
        """Fetch every release of repo, following pagination."""
        repo = Repo(repo)
        url: Optional[str] = f"{releases_url(self.base_url, repo)}?per_page={Constants.REPO_API_PER_PAGE}"
        releases: List[Release] = []
        while url:
            status, headers, body = await self._get(repo, url, "application/vnd.github+json")
            raise_for_status(repo, status, url)
            try:
                data = json.loads(body)
            except ValueError as exc:
                raise ManifestFetchFailed(repo, f"invalid releases payload from {safe_url(url)}", status) from exc
            if not isinstance(data, list):
                raise ManifestFetchFailed(repo, f"unexpected releases payload from {safe_url(url)}", status)
            releases.extend(Release.from_api(item) for item in data if isinstance(item, dict))
            url = next_link(headers.get("Link") or headers.get("link"))
        return releases

    async def manifest_from_release(self, repo: str, release: Release) -> Manifest:
        """Download and parse the manifest asset of release."""
        repo = Repo(repo)
        asset = manifest_asset(repo, release)
        status, _, body = await self._get(repo, asset.download_url, "application/octet-stream")
        raise_for_status(repo, status, asset.download_url)
        return build_manifest(repo, release, body)

    async def fetch_manifest(self, repo: str, constraint: Version) -> Manifest:
        """Fetch the manifest of the newest release of repo satisfying constraint."""
        repo = Repo(repo)
        release = select_release(repo, await self.list_releases(repo), constraint)
        logger.info("Fetching manifest for %s %s", repo, release.tag_name)
        return await self.manifest_from_release(repo, release)
