"""Swizzle - mod manager for game mods released on GitHub.

Raises:
    SystemExit: with an ExitCodes value when a command fails
"""

import asyncio
import json
import logging
import os
import sys

from args import parse_args
from cli_config import apply_cli_overrides, apply_file_config, get_github_token
from constants import Constants, ExitCodes
from common.errors import (
    ManifestFetchFailed,
    ManifestNotFound,
    MissingAsset,
    NilManifest,
    SwizzleError,
    VersionConflict,
)
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from archive import install_release_files
from manifest import Manifest, read_manifest_file, write_manifest_file
from manifest.models import Game, Repo
from repository.github import GitHubClient
from repository.github_async import AsyncGitHubClient
from resolver import ConcurrentDependencyResolver, DependencyResolver, Resolution
from versioning import is_valid, parse_dependency_token

logger = logging.getLogger(__name__)


def exit_code_for(exc: Exception) -> ExitCodes:
    """Map an error raised by a command onto the process exit code."""
    if isinstance(exc, ManifestFetchFailed):
        return ExitCodes.CONNECTION_ERROR
    if isinstance(exc, ManifestNotFound) and not exc.repo:
        # No repo means a local manifest file was missing.
        return ExitCodes.FILE_ERROR
    if isinstance(exc, (VersionConflict, ManifestNotFound, MissingAsset, NilManifest)):
        return ExitCodes.RESOLUTION_ERROR
    return ExitCodes.FILE_ERROR


def _setup_logging(args):
    """Configure logging from --loglevel and --logfile."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ["SWIZZLE_LOG_LEVEL"] = str(args.LOG_LEVEL).upper()
    configure_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(args.LOG_LEVEL).upper(), logging.INFO))
    if getattr(args, "LOG_FILE", None):
        handler = logging.FileHandler(args.LOG_FILE)
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)


def cmd_init(args) -> None:
    """Write a new manifest file."""
    path = args.MANIFEST_FILE
    if os.path.exists(path) and not args.FORCE:
        raise FileExistsError(f"{path} already exists; use --force to overwrite")
    if args.GAME_VERSION and not is_valid(args.GAME_VERSION):
        logger.warning("Game version '%s' is not a valid version constraint", args.GAME_VERSION)
    manifest = Manifest(
        name=args.NAME,
        repo=Repo(args.REPO or ""),
        version=args.VERSION,
        description=args.DESCRIPTION,
        game=Game(executable=args.GAME_EXE, version=args.GAME_VERSION),
    )
    write_manifest_file(path, manifest)
    logger.info("Initialized %s", path)


def _requested_dependency(args):
    if args.DEPENDENCY:
        repo, constraint = parse_dependency_token(args.DEPENDENCY)
    else:
        repo = args.REPO
        constraint = None if (args.VERSION or "").lower() == Constants.LATEST else args.VERSION
    if not repo or "/" not in repo:
        raise ValueError(f"dependency '{repo or ''}' must be given as owner/name")
    return Repo(repo), constraint


def cmd_add(args, client: GitHubClient) -> Manifest:
    """Add a dependency, with its transitive dependencies, to the manifest file."""
    root = read_manifest_file(args.MANIFEST_FILE)
    repo, constraint = _requested_dependency(args)
    if constraint is None:
        # Pin to the newest release that publishes a manifest.
        latest = client.latest_manifest(repo)
        constraint = f">={latest.version}"
        logger.info("Latest release of %s is %s", repo, latest.version)
    resolver = DependencyResolver(client.fetch_manifest)
    updated = resolver.add_dependency(root, repo, constraint)
    write_manifest_file(args.MANIFEST_FILE, updated)
    logger.info("Added %s %s", repo, constraint)
    return updated


async def _resolve_concurrently(root: Manifest, token) -> Resolution:
    async with AsyncGitHubClient(token=token) as client:
        resolver = ConcurrentDependencyResolver(client.fetch_manifest)
        return await resolver.resolve(root)


def resolve_manifest(root: Manifest, client: GitHubClient, concurrent: bool = False) -> Resolution:
    """Resolve the dependency graph of root, sequentially or concurrently."""
    if concurrent:
        return asyncio.run(_resolve_concurrently(root, client.token))
    return DependencyResolver(client.fetch_manifest).resolve(root)


def cmd_resolve(args, client: GitHubClient) -> Resolution:
    """Print every resolved dependency of the manifest file."""
    root = read_manifest_file(args.MANIFEST_FILE)
    resolution = resolve_manifest(root, client, concurrent=args.CONCURRENT)
    if args.JSON:
        payload = [
            {
                "repo": str(repo),
                "constraint": raw,
                "version": resolution.manifests[repo].version if repo in resolution.manifests else None,
            }
            for repo, raw in resolution.raw.items()
        ]
        print(json.dumps(payload, indent=2))
    else:
        for repo, raw in resolution.raw.items():
            manifest = resolution.manifests.get(repo)
            print(f"{repo} {raw or '*'} -> {manifest.version if manifest else '?'}")
    return resolution


def cmd_install(args, client: GitHubClient) -> None:
    """Resolve the manifest file and install every dependency into the game folder."""
    root = read_manifest_file(args.MANIFEST_FILE)
    resolution = resolve_manifest(root, client, concurrent=args.CONCURRENT)
    download_dir = args.DOWNLOAD_DIR or Constants.DEFAULT_DOWNLOAD_DIR
    for repo, manifest in resolution.manifests.items():
        logger.info("Installing %s %s", repo, manifest.version)
        install_release_files(manifest, client, download_dir, args.GAME_DIR)
    logger.info("Installed %d mods into %s", len(resolution.manifests), args.GAME_DIR)


def run(args) -> ExitCodes:
    """Dispatch a parsed command line and map its failure onto an exit code."""
    client = GitHubClient(token=get_github_token(args))
    try:
        if args.action == "init":
            cmd_init(args)
        elif args.action == "add":
            cmd_add(args, client)
        elif args.action == "resolve":
            cmd_resolve(args, client)
        elif args.action == "install":
            cmd_install(args, client)
    except (SwizzleError, OSError, ValueError) as exc:
        logger.error("%s", exc)
        return exit_code_for(exc)
    return ExitCodes.SUCCESS


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    apply_file_config(args)
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    code = run(args)
    sys.exit(code.value)


if __name__ == "__main__":
    main()
