from __future__ import annotations
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Protocol, Union

from .console import LOG, cprint


# ============================================================================
# Command Execution
# ============================================================================
@dataclass
class RunResult:
    ok: bool
    code: int
    out: str
    err: str


def run_command(cmd: List[str], capture: bool = False) -> RunResult:
    """Run ``cmd`` to completion and report how it went.

    Without ``capture`` the child shares our terminal so sudo and pacman can
    prompt the user. A missing executable is reported as exit code 127.
    """
    LOG.debug(f"Running: {' '.join(cmd)}")
    try:
        proc = subprocess.run(cmd, capture_output=capture, text=True, check=False)
    except FileNotFoundError as e:
        return RunResult(False, 127, "", f"Command not found: {e.filename or cmd[0]}")
    except OSError as e:
        return RunResult(False, -1, "", f"Exception: {e}")

    result = RunResult(
        ok=(proc.returncode == 0),
        code=proc.returncode,
        out=proc.stdout or "",
        err=proc.stderr or "",
    )
    if not result.ok:
        LOG.debug(f"Command failed with exit code {result.code}")
    return result


# ============================================================================
# Package Manager Backend
# ============================================================================
class PackageBackend(Protocol):
    def install(self, archive: Union[str, Path]) -> RunResult: ...

    def remove(self, name: str) -> RunResult: ...

    def decompress(self, source: Union[str, Path], dest: Union[str, Path]) -> RunResult: ...


class PacmanBackend:
    """Installs and removes packages through pacman."""

    binaries = ("pacman", "unzstd")

    def __init__(self, use_sudo: bool = True):
        self.use_sudo = use_sudo

    def _privileged(self, cmd: List[str]) -> List[str]:
        return ["sudo"] + cmd if self.use_sudo else cmd

    def install_command(self, archive: Union[str, Path]) -> List[str]:
        return self._privileged(["pacman", "-U", str(archive)])

    def remove_command(self, name: str) -> List[str]:
        return self._privileged(["pacman", "-Rns", name])

    def decompress_command(self, source: Union[str, Path], dest: Union[str, Path]) -> List[str]:
        return ["unzstd", "-f", str(source), "-o", str(dest)]

    def install(self, archive):
        return run_command(self.install_command(archive))

    def remove(self, name):
        return run_command(self.remove_command(name))

    def decompress(self, source, dest):
        result = run_command(self.decompress_command(source, dest))
        if result.code == 127:
            cprint("unzstd is not installed (package 'zstd')", "WARNING")
        return result

    def available(self) -> Dict[str, bool]:
        binaries = self.binaries + (("sudo",) if self.use_sudo else ())
        return {name: shutil.which(name) is not None for name in binaries}
