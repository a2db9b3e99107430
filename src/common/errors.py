"""Error types raised by swizzle.

Invalid version strings are not errors: they parse to the zero version.
"""
from __future__ import annotations

from typing import Optional


class SwizzleError(Exception):
    """Base class for every error swizzle raises on purpose."""


class ManifestNotFound(SwizzleError):
    """A release, manifest asset or manifest file does not exist."""

    def __init__(self, repo: Optional[str], detail: str):
        self.repo = repo
        self.detail = detail
        prefix = f"'{repo}': " if repo else ""
        super().__init__(f"{prefix}manifest not found: {detail}")


class ManifestFetchFailed(SwizzleError):
    """Network or transport failure while talking to the release host."""

    def __init__(self, repo: Optional[str], detail: str, status_code: int = 0):
        self.repo = repo
        self.detail = detail
        self.status_code = status_code
        prefix = f"'{repo}': " if repo else ""
        super().__init__(f"{prefix}fetch failed (status {status_code}): {detail}")


class ManifestParseFailed(SwizzleError):
    """Manifest data is neither valid YAML nor valid JSON."""

    def __init__(self, yaml_error: Exception, json_error: Exception):
        self.yaml_error = yaml_error
        self.json_error = json_error
        super().__init__(f"invalid manifest: {yaml_error} : {json_error}")


class VersionConflict(SwizzleError):
    """Two constraints on the same dependency cannot both hold."""

    def __init__(self, repo: str, existing: str, requested: str):
        self.repo = repo
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"'{repo}' version '{existing}' is incompatible with '{requested}'"
        )


class NilManifest(SwizzleError):
    """An operation that needs a manifest was given none."""

    def __init__(self, detail: str = "nil manifest"):
        super().__init__(detail)


class MissingAsset(SwizzleError):
    """A release file has no matching release asset to download."""

    def __init__(self, repo: Optional[str], file_name: str):
        self.repo = repo
        self.file_name = file_name
        super().__init__(f"'{repo}': no release asset for file '{file_name}'")


class ArchiveError(SwizzleError):
    """An archive could not be unpacked."""


class UnknownArchiveFormat(ArchiveError):
    """The archive extension is not one swizzle can unpack."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"unknown archive format: {location}")
