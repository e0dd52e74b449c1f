from __future__ import annotations
import json
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

from .console import cprint
from .errors import PersistenceFailure


# ============================================================================
# Ledger of packages installed through crafty
# ============================================================================
class Ledger:
    """Set of logical package names, persisted as ``{"packages": [...]}``.

    Every mutation is written through to disk immediately. There is no file
    locking, so two crafty processes writing at once race and the last
    writer wins.
    """

    def __init__(self, path: Path, packages: Optional[Iterable[str]] = None):
        self.path = Path(path)
        self.packages: Set[str] = set(packages or ())

    @classmethod
    def load(cls, path: Path) -> "Ledger":
        """Read the ledger at ``path``; a missing or corrupt file is empty."""
        path = Path(path)
        if not path.exists():
            return cls(path)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            cprint(f"Ignoring unreadable ledger {path}: {e}", "WARNING")
            return cls(path)

        packages = data.get("packages") if isinstance(data, dict) else None
        if not isinstance(packages, list):
            cprint(f"Ignoring malformed ledger {path}", "WARNING")
            return cls(path)
        return cls(path, (p for p in packages if isinstance(p, str)))

    def save(self):
        """Write the full set to disk, creating parent directories."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps({"packages": sorted(self.packages)}, indent=2)
            self.path.write_text(payload + "\n", encoding="utf-8")
        except OSError as e:
            raise PersistenceFailure(f"Could not write ledger {self.path}: {e}") from e

    def add(self, name: str):
        self.packages.add(name)
        self.save()

    def remove(self, name: str):
        self.packages.discard(name)
        self.save()

    def contains(self, name: str) -> bool:
        return name in self.packages

    __contains__ = contains

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.packages))

    def __len__(self) -> int:
        return len(self.packages)
