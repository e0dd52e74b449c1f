from __future__ import annotations
import os
import platform
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

import distro

# ----------------------------
# Configuration & Constants
# ----------------------------
DEFAULT_TREE_URL = "https://github.com/archcraft-os/pkgs/tree/main/x86_64"
DEFAULT_DOWNLOAD_URL = "https://github.com/archcraft-os/pkgs/raw/refs/heads/main/x86_64/"
DEFAULT_LEDGER_PATH = Path.home() / ".config" / ".crafty" / "installed.json"

# Distribution prefix some archives in the listing carry (archcraft-fish-...)
PACKAGE_PREFIX = "archcraft"
ARCHITECTURES = ("any", "x86_64")

# Distributions whose native package manager is pacman
ARCH_FAMILY = {"arch", "archcraft", "archarm", "endeavouros", "manjaro", "garuda", "cachyos", "artix"}


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _default_use_sudo() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is None or geteuid() != 0


@dataclass
class Settings:
    tree_url: str = DEFAULT_TREE_URL
    download_base_url: str = DEFAULT_DOWNLOAD_URL
    ledger_path: Path = DEFAULT_LEDGER_PATH
    download_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    use_sudo: bool = field(default_factory=_default_use_sudo)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from defaults, honoring CRAFTY_* overrides."""
        env = os.environ if environ is None else environ
        settings = cls()
        if env.get("CRAFTY_TREE_URL"):
            settings.tree_url = env["CRAFTY_TREE_URL"]
        if env.get("CRAFTY_DOWNLOAD_URL"):
            settings.download_base_url = env["CRAFTY_DOWNLOAD_URL"]
        if env.get("CRAFTY_LEDGER"):
            settings.ledger_path = Path(env["CRAFTY_LEDGER"]).expanduser()
        if env.get("CRAFTY_DOWNLOAD_DIR"):
            settings.download_dir = Path(env["CRAFTY_DOWNLOAD_DIR"]).expanduser()
        if _env_flag(env.get("CRAFTY_NO_SUDO")):
            settings.use_sudo = False
        return settings

    def archive_url(self, filename: str) -> str:
        base = self.download_base_url
        if not base.endswith("/"):
            base += "/"
        return f"{base}{filename}"


# ----------------------------
# OS & Distribution Detection
# ----------------------------
def detect_system() -> Dict[str, str]:
    """Describe the running distribution."""
    return {
        "os": platform.system(),
        "distribution": distro.id() or platform.system().lower(),
        "version": distro.version() or "",
        "like": distro.like() or "",
        "architecture": platform.machine(),
    }


def is_arch_based(system: Optional[Dict[str, str]] = None) -> bool:
    info = system or detect_system()
    family = {info.get("distribution", "")} | set(info.get("like", "").split())
    return bool(family & ARCH_FAMILY)
