from __future__ import annotations
from typing import List, Optional

import requests

from . import __version__
from .catalog import fetch_catalog
from .config import Settings, detect_system, is_arch_based
from .console import cprint
from .download import archive_path, decompressed_path, download_archive, is_valid_zst
from .errors import CraftyError, InvalidArchive, SubprocessFailure
from .ledger import Ledger
from .matcher import filter_by_keyword, list_all, parse_archive, resolve_exact
from .pacman import PackageBackend, PacmanBackend, RunResult


def _last_error_line(result: RunResult) -> str:
    lines = (result.err or result.out).strip().splitlines()
    if not lines:
        return f"exit code {result.code}"
    line = lines[-1]
    return line[:177] + "..." if len(line) > 180 else line


class Dispatcher:
    """Runs the crafty verbs.

    Each verb returns a process exit code. Catalog and download problems are
    reported here and end the verb; a ledger that cannot be written raises
    ``PersistenceFailure`` to the caller.
    """

    def __init__(self, settings: Settings, backend: Optional[PackageBackend] = None,
                 session: Optional[requests.Session] = None):
        self.settings = settings
        self.backend = backend or PacmanBackend(settings.use_sudo)
        self.session = session or requests.Session()

    def load_ledger(self) -> Ledger:
        return Ledger.load(self.settings.ledger_path)

    def catalog(self) -> List[str]:
        return fetch_catalog(self.settings.tree_url, self.session)

    # ---------------- install / upgrade ---------------- #
    def install(self, name: str) -> int:
        try:
            filename = resolve_exact(self.catalog(), name)
        except CraftyError as e:
            cprint(str(e), "ERROR")
            return 1
        if filename is None:
            cprint(f"Package '{name}' not found in the repository.", "ERROR")
            return 1

        try:
            path = download_archive(self.settings.archive_url(filename),
                                    archive_path(self.settings.download_dir, filename),
                                    self.session)
            if not is_valid_zst(path):
                raise InvalidArchive(f"Downloaded file {path} is not a valid zstd archive.")
            self._install_archive(path)
        except CraftyError as e:
            cprint(str(e), "ERROR")
            return 1

        cprint(f"Installed: {name}", "SUCCESS")
        self.load_ledger().add(parse_archive(filename).pkgname)
        return 0

    def _install_archive(self, path):
        cprint("Trying to install using pacman...", "INFO")
        result = self.backend.install(path)
        if result.ok:
            return

        cprint("Pacman failed to install the .zst file. Trying to decompress and retry...", "WARNING")
        tar_path = decompressed_path(path)
        unpacked = self.backend.decompress(path, tar_path)
        if not unpacked.ok:
            raise SubprocessFailure(f"Failed to decompress {path.name}: {_last_error_line(unpacked)}",
                                    unpacked.code)

        retry = self.backend.install(tar_path)
        if not retry.ok:
            raise SubprocessFailure(f"Pacman failed to install decompressed package: {_last_error_line(retry)}",
                                    retry.code)

    def upgrade(self, name: Optional[str] = None) -> int:
        """Reinstall ``name``, or every ledger entry when no name is given.

        There is no version comparison: packages are reinstalled even when
        the listing holds the same version that is already installed.
        """
        ledger = self.load_ledger()
        if name:
            if not ledger.contains(name):
                cprint(f"Package '{name}' is not installed via crafty.", "WARNING")
                return 1
            cprint(f"Upgrading {name}", "INFO")
            return self.install(name)

        if not len(ledger):
            cprint("No packages have been installed via crafty yet.", "INFO")
            return 0

        failed = []
        for installed in ledger:
            cprint(f"Upgrading {installed}", "INFO")
            if self.install(installed) != 0:
                failed.append(installed)
        if failed:
            cprint(f"Failed to upgrade: {', '.join(failed)}", "ERROR")
            return 1
        return 0

    # ---------------- read-only ---------------- #
    def search(self, keyword: str) -> int:
        cprint(f"Searching for '{keyword}' in ArchCraft GitHub...", "INFO")
        try:
            packages = filter_by_keyword(self.catalog(), keyword)
        except CraftyError as e:
            cprint(str(e), "ERROR")
            return 1

        if not packages:
            cprint(f"No packages found for '{keyword}'", "WARNING")
            return 0
        cprint("Found packages:", "SUCCESS")
        for pkg in packages:
            print(f"- {pkg}")
        return 0

    def list_packages(self) -> int:
        cprint("Fetching package list from ArchCraft GitHub...", "INFO")
        try:
            packages = list_all(self.catalog())
        except CraftyError as e:
            cprint(f"Failed to fetch package list: {e}", "ERROR")
            return 1

        if not packages:
            cprint("The repository lists no packages.", "WARNING")
            return 0
        cprint(f"Available packages ({len(packages)} total):", "SUCCESS")
        for pkg in packages:
            print(f"- {pkg}")
        return 0

    def installed(self) -> int:
        ledger = self.load_ledger()
        if not len(ledger):
            cprint("No packages have been installed via crafty yet.", "INFO")
            return 0
        cprint(f"Packages installed via crafty ({len(ledger)}):", "SUCCESS")
        for name in ledger:
            print(f"- {name}")
        return 0

    # ---------------- remove ---------------- #
    def remove(self, name: str) -> int:
        cprint(f"Removing package {name}", "INFO")
        result = self.backend.remove(name)
        if not result.ok:
            cprint(f"Failed to remove package: {_last_error_line(result)}", "ERROR")
            return 1

        cprint(f"Removed: {name}", "SUCCESS")
        self.load_ledger().remove(name)
        return 0

    # ---------------- status ---------------- #
    def status(self) -> int:
        system = detect_system()
        cprint("=" * 60, "CYAN")
        cprint(f"crafty {__version__}", "SUCCESS")
        cprint(f"System: {system['distribution']} {system['version']} ({system['architecture']})", "INFO")
        cprint("=" * 60, "CYAN")

        if not is_arch_based(system):
            cprint("This does not look like an Arch based system; pacman installs will likely fail.", "WARNING")

        available = getattr(self.backend, "available", None)
        if available is not None:
            for binary, found in available().items():
                cprint(f"  {binary}: {'found' if found else 'missing'}", "SUCCESS" if found else "WARNING")

        ledger = self.load_ledger()
        cprint(f"\nPackages installed via crafty: {len(ledger)}", "INFO")
        cprint(f"Ledger: {ledger.path}", "MUTED")
        cprint("\nRun 'crafty --help' for the list of commands.", "INFO")
        return 0
