"""Manifest parsing, serialization and file I/O.

Manifests are YAML or JSON. Parsing tries YAML first and falls back to JSON;
when both fail the combined error carries each underlying failure.
Serialization always writes YAML with sorted keys so output is stable.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Union

import yaml

from common.errors import ManifestNotFound, ManifestParseFailed
from .models import Manifest

logger = logging.getLogger(__name__)


def _as_mapping(data: Any, fmt: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{fmt} manifest must be a mapping, got {type(data).__name__}")
    return data


def parse_yaml_manifest(data: str) -> Manifest:
    """Parse YAML manifest text."""
    return Manifest.from_dict(_as_mapping(yaml.safe_load(data), "yaml"))


def parse_json_manifest(data: str) -> Manifest:
    """Parse JSON manifest text."""
    return Manifest.from_dict(_as_mapping(json.loads(data), "json"))


def parse_manifest(data: Union[bytes, str]) -> Manifest:
    """Parse manifest data in either supported syntax.

    Raises:
        ManifestParseFailed: when the data is neither a YAML nor a JSON manifest.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ManifestParseFailed(exc, exc) from exc

    try:
        return parse_yaml_manifest(data)
    except (yaml.YAMLError, ValueError, TypeError) as yaml_err:
        try:
            manifest = parse_json_manifest(data)
        except (ValueError, TypeError) as json_err:
            raise ManifestParseFailed(yaml_err, json_err) from json_err
        logger.debug("Manifest parsed as JSON after YAML failure: %s", yaml_err)
        return manifest


def serialize_manifest(manifest: Manifest) -> str:
    """Encode manifest as deterministic YAML."""
    return yaml.safe_dump(manifest.to_dict(), sort_keys=True, default_flow_style=False, allow_unicode=True)


def read_manifest_file(path: str) -> Manifest:
    """Read and parse the manifest file at path.

    Raises:
        ManifestNotFound: when path does not exist.
        ManifestParseFailed: when its content is not a manifest.
    """
    clean = os.path.normpath(path)
    try:
        with open(clean, "rb") as fh:
            data = fh.read()
    except FileNotFoundError as exc:
        raise ManifestNotFound(None, f"no such file '{clean}'") from exc
    return parse_manifest(data)


def write_manifest_file(path: str, manifest: Manifest) -> None:
    """Write manifest to path, creating parent folders as needed."""
    clean = os.path.normpath(path)
    parent = os.path.dirname(clean)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(clean, "w", encoding="utf-8") as fh:
        fh.write(serialize_manifest(manifest))
    logger.info("Manifest written: %s", clean)
