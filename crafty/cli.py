from __future__ import annotations
import argparse
import sys
from typing import List, Optional

import requests

from . import __version__
from .commands import Dispatcher
from .config import Settings
from .console import LOG, cprint
from .errors import CraftyError
from .pacman import PacmanBackend


# ============================================================================
# CLI Interface
# ============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Creates the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="crafty",
        description="Tool to manage ArchCraft packages from GitHub",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  crafty search fish
  crafty install fish
  crafty upgrade
  crafty remove fish
  crafty list
        """,
    )
    parser.add_argument("--version", action="version", version=f"crafty {__version__}")
    parser.add_argument("-q", "--quiet", action="store_true", help="Quiet mode (errors only)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("install", help="Install a package from ArchCraft GitHub")
    p.add_argument("package")

    p = sub.add_parser("upgrade", help="Upgrade a previously installed package (all when omitted)")
    p.add_argument("package", nargs="?", default=None)

    p = sub.add_parser("search", help="Search for a package in the ArchCraft GitHub repository")
    p.add_argument("keyword")

    p = sub.add_parser("remove", help="Remove a package from the system")
    p.add_argument("package")

    sub.add_parser("list", help="List all packages available in the ArchCraft GitHub repository")
    sub.add_parser("installed", help="Show packages installed via crafty")

    return parser


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = f"crafty/{__version__}"
    return session


def run(args: argparse.Namespace, dispatcher: Dispatcher) -> int:
    if args.command == "install":
        return dispatcher.install(args.package)
    if args.command == "upgrade":
        return dispatcher.upgrade(args.package)
    if args.command == "search":
        return dispatcher.search(args.keyword)
    if args.command == "remove":
        return dispatcher.remove(args.package)
    if args.command == "list":
        return dispatcher.list_packages()
    if args.command == "installed":
        return dispatcher.installed()
    return dispatcher.status()


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    LOG.quiet = args.quiet
    LOG.verbose = args.verbose

    settings = Settings.from_env()
    dispatcher = Dispatcher(settings, PacmanBackend(settings.use_sudo), build_session())

    try:
        return run(args, dispatcher)
    except KeyboardInterrupt:
        cprint("\nOperation cancelled by user.", "WARNING")
        return 1
    except CraftyError as e:
        cprint(str(e), "ERROR")
        return 1


if __name__ == "__main__":
    sys.exit(main())
