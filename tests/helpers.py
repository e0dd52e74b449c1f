"""Fakes shared by the test suite: HTTP session, pacman backend, listing page."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import requests

from crafty.catalog import EMBEDDED_END, EMBEDDED_START
from crafty.pacman import RunResult

ZSTD_BYTES = b"\x28\xb5\x2f\xfd" + b"\x00" * 60

CATALOG = [
    "archcraft-fish-3.6.1-1-x86_64.pkg.tar.zst",
    "htop-3.2.2-2-x86_64.pkg.tar.zst",
    "notes.txt",
]


def listing_html(names: List[str], extra_items: Optional[List[dict]] = None) -> str:
    items = [{"name": n, "contentType": "file"} for n in names] + (extra_items or [])
    payload = {"payload": {"tree": {"items": items}}}
    return (
        "<html><head><title>pkgs</title></head><body>"
        f"{EMBEDDED_START}{json.dumps(payload)}{EMBEDDED_END}"
        "<script>console.log('other');</script></body></html>"
    )


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", content: bytes = b""):
        self.status_code = status_code
        self.text = text
        self.content = content
        self.headers = {"Content-Length": str(len(content))} if content else {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size: int = 1024):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    """Serves canned responses by URL and records every request."""

    def __init__(self, routes: Optional[Dict[str, FakeResponse]] = None):
        self.routes = dict(routes or {})
        self.requests: List[str] = []

    def get(self, url, **kwargs):
        self.requests.append(url)
        if url not in self.routes:
            raise requests.ConnectionError(f"no route to {url}")
        return self.routes[url]


class FakeBackend:
    """Stands in for pacman; outcomes are queued per operation."""

    def __init__(self, install=(True,), decompress=True, remove=True):
        self.install_outcomes = list(install)
        self.decompress_ok = decompress
        self.remove_ok = remove
        self.calls: List[tuple] = []

    def install(self, archive):
        self.calls.append(("install", str(archive)))
        ok = self.install_outcomes.pop(0) if self.install_outcomes else True
        return RunResult(ok, 0 if ok else 1, "", "" if ok else "error: could not install")

    def decompress(self, source, dest):
        self.calls.append(("decompress", str(source), str(dest)))
        if self.decompress_ok:
            Path(dest).write_bytes(b"tar")
        return RunResult(self.decompress_ok, 0 if self.decompress_ok else 1, "", "")

    def remove(self, name):
        self.calls.append(("remove", name))
        return RunResult(self.remove_ok, 0 if self.remove_ok else 1, "",
                         "" if self.remove_ok else "error: target not found: " + name)


