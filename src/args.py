"""Argument parsing functionality for swizzle."""

import argparse
from constants import Constants


def _add_common(parser):
    """Logging and config options shared by every command."""
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to YAML configuration file",
                        action="store",
                        type=str)
    parser.add_argument("--github-token",
                        dest="GITHUB_TOKEN",
                        help="GitHub token (defaults to the GITHUB_TOKEN environment variable)",
                        action="store",
                        type=str)
    parser.add_argument("--api-base",
                        dest="API_BASE",
                        help="GitHub API base URL",
                        action="store",
                        type=str)


def _add_file(parser):
    parser.add_argument("-f", "--file",
                        dest="MANIFEST_FILE",
                        help=f"Swizzle manifest file (default: {Constants.DEFAULT_MANIFEST_FILE})",
                        action="store",
                        type=str,
                        default=Constants.DEFAULT_MANIFEST_FILE)


def _add_concurrency(parser):
    parser.add_argument("--concurrent",
                        dest="CONCURRENT",
                        help="Fetch sibling manifests concurrently.",
                        action="store_true")
    parser.add_argument("--max-concurrency",
                        dest="MAX_CONCURRENCY",
                        help="Upper bound on concurrent manifest fetches.",
                        type=int)


def build_parser():
    """Build the swizzle argument parser."""
    parser = argparse.ArgumentParser(
        prog="swizzle",
        description="Swizzle - mod manager for game mods released on GitHub",
        add_help=True,
    )
    sub = parser.add_subparsers(dest="action", metavar="COMMAND")
    sub.required = True

    init_p = sub.add_parser("init", help="Initialize a new swizzle manifest file.")
    _add_file(init_p)
    init_p.add_argument("-n", "--name", dest="NAME", help="Mod name.", default="")
    init_p.add_argument("-d", "--desc", dest="DESCRIPTION", help="Mod short description text.", default="")
    init_p.add_argument("-g", "--game", dest="GAME_EXE", help="The game executable the mod is for.", default="")
    init_p.add_argument("-G", "--game-version",
                        dest="GAME_VERSION",
                        help="The game version this mod is for. Defaults to all versions.",
                        default=Constants.DEFAULT_GAME_VERSION)
    init_p.add_argument("-r", "--repo", dest="REPO", help="GitHub repository (owner/name) of the mod.", default="")
    init_p.add_argument("-V", "--version", dest="VERSION", help="Mod version.", default="")
    init_p.add_argument("--force", dest="FORCE", help="Overwrite an existing manifest file.", action="store_true")
    _add_common(init_p)

    add_p = sub.add_parser("add", help="Add a mod dependency and its dependencies.")
    _add_file(add_p)
    add_p.add_argument("-r", "--repo", dest="REPO", help="GitHub repository (owner/name).")
    add_p.add_argument("-v", "--version",
                       dest="VERSION",
                       help="Release version constraint, or 'latest'.",
                       default=Constants.LATEST)
    add_p.add_argument("DEPENDENCY",
                       nargs="?",
                       help="Dependency token owner/name[:constraint]; alternative to --repo/--version.")
    _add_common(add_p)

    resolve_p = sub.add_parser("resolve", help="Resolve and print all dependencies of a manifest.")
    _add_file(resolve_p)
    _add_concurrency(resolve_p)
    resolve_p.add_argument("--json", dest="JSON", help="Print the result as JSON.", action="store_true")
    _add_common(resolve_p)

    install_p = sub.add_parser("install", help="Download and unpack all dependencies into a game folder.")
    _add_file(install_p)
    install_p.add_argument("-d", "--directory",
                           dest="GAME_DIR",
                           help="Game directory mods are installed into.",
                           required=True)
    install_p.add_argument("--download-dir",
                           dest="DOWNLOAD_DIR",
                           help="Folder for downloaded archives.",
                           default=None)
    _add_concurrency(install_p)
    _add_common(install_p)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
