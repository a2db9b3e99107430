"""CLI configuration: YAML config loading and command-line overrides.

Precedence, lowest to highest: built-in Constants, YAML config file,
environment (GITHUB_TOKEN), command-line flags.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from constants import Constants, apply_config, load_yaml_config

logger = logging.getLogger(__name__)


def apply_file_config(args) -> None:
    """Load the YAML config (explicit --config or default locations) onto Constants."""
    cfg = load_yaml_config(getattr(args, "CONFIG", None))
    if cfg:
        apply_config(cfg)


def apply_cli_overrides(args) -> None:
    """Apply CLI overrides for runtime tunables."""
    if getattr(args, "API_BASE", None):
        Constants.GITHUB_API_BASE = args.API_BASE.rstrip("/")
    if getattr(args, "MAX_CONCURRENCY", None) is not None:
        if args.MAX_CONCURRENCY < 1:
            logger.warning("Ignoring --max-concurrency %s; must be at least 1", args.MAX_CONCURRENCY)
        else:
            Constants.MAX_CONCURRENCY = int(args.MAX_CONCURRENCY)


def get_github_token(args) -> Optional[str]:
    """Return the GitHub token from --github-token or the environment."""
    token = getattr(args, "GITHUB_TOKEN", None)
    if token and token.strip():
        return token.strip()
    env_token = os.environ.get(Constants.ENV_GITHUB_TOKEN)
    if env_token and env_token.strip():
        return env_token.strip()
    return None
