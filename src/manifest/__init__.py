"""Manifest model and codec."""

from .codec import (
    parse_manifest,
    read_manifest_file,
    serialize_manifest,
    write_manifest_file,
)
from .models import (
    AgeRating,
    EsrbRating,
    Game,
    Manifest,
    Release,
    ReleaseAsset,
    ReleaseFile,
    Repo,
)

__all__ = [
    "AgeRating",
    "EsrbRating",
    "Game",
    "Manifest",
    "Release",
    "ReleaseAsset",
    "ReleaseFile",
    "Repo",
    "parse_manifest",
    "read_manifest_file",
    "serialize_manifest",
    "write_manifest_file",
]
