from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

import requests

from .console import ProgressBar, cprint, format_size
from .errors import NetworkFailure

ZSTD_MAGIC = b"\x28\xb5\x2f\xfd"
CHUNK_SIZE = 32768


def has_zstd_magic(data: bytes) -> bool:
    return bytes(data[:4]) == ZSTD_MAGIC


def is_valid_zst(path: Union[str, Path]) -> bool:
    """Check that the file at ``path`` starts with the zstd frame magic."""
    try:
        with open(path, "rb") as f:
            return has_zstd_magic(f.read(len(ZSTD_MAGIC)))
    except OSError:
        return False


def archive_path(download_dir: Path, filename: str) -> Path:
    return Path(download_dir) / filename


def decompressed_path(path: Path) -> Path:
    """Sibling path of ``path`` without the trailing ``.zst``."""
    path = Path(path)
    return path.with_name(path.name[:-len(".zst")]) if path.name.endswith(".zst") else path.with_suffix(".tar")


def download_archive(url: str, dest: Path, session: Optional[requests.Session] = None) -> Path:
    """Stream ``url`` verbatim into ``dest``."""
    http = session or requests.Session()
    dest = Path(dest)
    cprint(f"Downloading from {url}", "INFO")

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with http.get(url, stream=True) as response:
            response.raise_for_status()
            total = int(response.headers.get("Content-Length") or 0)
            progress = ProgressBar(total, "Download", "B")
            downloaded = 0
            with open(dest, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)
                    progress.update(len(chunk))
            progress.finish()
    except (requests.RequestException, OSError) as e:
        if dest.exists():
            dest.unlink()
        raise NetworkFailure(f"Download failed: {e}") from e

    cprint(f"Downloaded {format_size(downloaded)} to {dest}", "SUCCESS")
    return dest
