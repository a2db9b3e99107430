"""Constants used in the project."""

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MANIFEST_ASSET_NAME = "swiz.zle"
    DEFAULT_MANIFEST_FILE = "swizzle.yml"
    DEFAULT_DOWNLOAD_DIR = os.path.join(".swizzle", "downloads")
    DEFAULT_GAME_VERSION = ">=v0.0.0"
    LATEST = "latest"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Repository API constants
    GITHUB_API_BASE = "https://api.github.com"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    REPO_API_PER_PAGE = 100
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
    DOWNLOAD_CHUNK_SIZE = 64 * 1024

    # Concurrent resolution
    MAX_CONCURRENCY = 8

    # Config file discovery
    ENV_CONFIG_PATH = "SWIZZLE_CONFIG"
    CONFIG_FILE_CANDIDATES = [
        "swizzle.config.yml",
        os.path.join("~", ".config", "swizzle", "config.yml"),
    ]


# Keys of the "swizzle:" config section that map onto Constants attributes.
_CONFIG_KEYS = {
    "github_api_base": "GITHUB_API_BASE",
    "request_timeout": "REQUEST_TIMEOUT",
    "http_retry_max": "HTTP_RETRY_MAX",
    "http_cache_ttl_sec": "HTTP_CACHE_TTL_SEC",
    "max_concurrency": "MAX_CONCURRENCY",
    "manifest_asset_name": "MANIFEST_ASSET_NAME",
    "download_dir": "DEFAULT_DOWNLOAD_DIR",
}


def _config_path(explicit: Optional[str] = None) -> Optional[str]:
    """Return the first existing config path in priority order."""
    candidates = []
    if explicit:
        candidates.append(explicit)
    env_path = os.environ.get(Constants.ENV_CONFIG_PATH)
    if env_path:
        candidates.append(env_path)
    candidates.extend(Constants.CONFIG_FILE_CANDIDATES)
    for candidate in candidates:
        path = os.path.expanduser(candidate)
        if os.path.isfile(path):
            return path
    return None


def load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML configuration file.

    Lookup order: explicit path, $SWIZZLE_CONFIG, ./swizzle.config.yml,
    ~/.config/swizzle/config.yml.

    Returns:
        dict: Parsed configuration, or an empty dict when no file is found.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    found = _config_path(path)
    if not found:
        return {}
    try:
        with open(found, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to load config %s: %s", found, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", found)
        return {}
    logger.debug("Loaded config from %s", found)
    return data


def apply_config(cfg: Dict[str, Any]) -> None:
    """Copy known keys from the ``swizzle`` section of cfg onto Constants."""
    section = cfg.get("swizzle", cfg) if isinstance(cfg, dict) else {}
    if not isinstance(section, dict):
        return
    for key, attr in _CONFIG_KEYS.items():
        if key not in section or section[key] is None:
            continue
        current = getattr(Constants, attr)
        value = section[key]
        if isinstance(current, int) and not isinstance(current, bool):
            try:
                value = int(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-integer config value %s=%r", key, value)
                continue
        setattr(Constants, attr, value)
