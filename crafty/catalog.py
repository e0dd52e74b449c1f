from __future__ import annotations
import json
from typing import Any, List, Optional

import requests

from .console import LOG
from .errors import NetworkFailure, ParseFailure

# GitHub renders directory listings client side; the file list ships as JSON
# inside this script tag.
EMBEDDED_START = '<script type="application/json" data-target="react-app.embeddedData">'
EMBEDDED_END = "</script>"
ITEMS_POINTER = "/payload/tree/items"


def extract_embedded_json(html: str) -> Any:
    """Parse the JSON blob embedded in a GitHub tree page."""
    start = html.find(EMBEDDED_START)
    if start < 0:
        raise ParseFailure("Embedded catalog data not found in listing page")
    start += len(EMBEDDED_START)

    end = html.find(EMBEDDED_END, start)
    if end < 0:
        raise ParseFailure("Embedded catalog data is not terminated")

    try:
        return json.loads(html[start:end])
    except ValueError as e:
        raise ParseFailure(f"Embedded catalog data is not valid JSON: {e}") from e


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Follow a JSON pointer (RFC 6901) through ``document``."""
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise ParseFailure(f"Invalid JSON pointer: {pointer!r}")

    node = document
    for raw in pointer[1:].split("/"):
        token = _unescape(raw)
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise ParseFailure(f"Catalog path {pointer} not present in listing data")
    return node


def catalog_from_html(html: str) -> List[str]:
    """Raw entry names from a listing page; items without a name are skipped."""
    items = resolve_pointer(extract_embedded_json(html), ITEMS_POINTER)
    if not isinstance(items, list):
        raise ParseFailure(f"Catalog path {ITEMS_POINTER} is not an array")

    names = []
    for item in items:
        name = item.get("name") if isinstance(item, dict) else None
        if isinstance(name, str):
            names.append(name)
    return names


def fetch_catalog(url: str, session: Optional[requests.Session] = None) -> List[str]:
    """Download the listing page at ``url`` and return its raw entry names.

    Every call re-fetches the page; nothing is cached between calls.
    """
    http = session or requests.Session()
    LOG.debug(f"Fetching catalog: {url}")
    try:
        response = http.get(url)
        response.raise_for_status()
        html = response.text
    except requests.RequestException as e:
        raise NetworkFailure(f"Could not fetch package listing: {e}") from e

    names = catalog_from_html(html)
    LOG.debug(f"Catalog lists {len(names)} entries")
    return names
