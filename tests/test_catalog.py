"""Tests for extracting the package catalog from a GitHub tree page."""

import pytest

from crafty.catalog import (
    EMBEDDED_START,
    catalog_from_html,
    extract_embedded_json,
    fetch_catalog,
    resolve_pointer,
)
from crafty.errors import NetworkFailure, ParseFailure

from tests.helpers import CATALOG, FakeResponse, FakeSession, listing_html

URL = "https://example.test/tree/x86_64"


def test_fetch_catalog_returns_raw_names_unfiltered() -> None:
    session = FakeSession({URL: FakeResponse(text=listing_html(CATALOG))})
    assert fetch_catalog(URL, session) == CATALOG
    assert session.requests == [URL]


def test_fetch_catalog_refetches_every_call() -> None:
    session = FakeSession({URL: FakeResponse(text=listing_html(CATALOG))})
    fetch_catalog(URL, session)
    fetch_catalog(URL, session)
    assert session.requests == [URL, URL]


def test_items_without_name_are_skipped() -> None:
    html = listing_html(["htop-3.2.2-2-x86_64.pkg.tar.zst"],
                        extra_items=[{"path": "x86_64/README"}, {"name": 42}, "junk"])
    assert catalog_from_html(html) == ["htop-3.2.2-2-x86_64.pkg.tar.zst"]


def test_connection_error_is_network_failure() -> None:
    with pytest.raises(NetworkFailure):
        fetch_catalog(URL, FakeSession())


def test_http_error_is_network_failure() -> None:
    session = FakeSession({URL: FakeResponse(status_code=404, text="Not Found")})
    with pytest.raises(NetworkFailure):
        fetch_catalog(URL, session)


def test_missing_start_marker() -> None:
    with pytest.raises(ParseFailure):
        extract_embedded_json("<html><body>no data here</body></html>")


def test_missing_end_marker() -> None:
    with pytest.raises(ParseFailure):
        extract_embedded_json(f"<html>{EMBEDDED_START}{{\"payload\": {{}}}}")


def test_invalid_json() -> None:
    with pytest.raises(ParseFailure):
        extract_embedded_json(f"{EMBEDDED_START}{{not json</script>")


def test_uses_first_embedded_blob() -> None:
    html = listing_html(["a-1-1-any.pkg.tar.zst"]) + listing_html(["b-1-1-any.pkg.tar.zst"])
    assert catalog_from_html(html) == ["a-1-1-any.pkg.tar.zst"]


def test_missing_items_path() -> None:
    html = f'{EMBEDDED_START}{{"payload": {{"tree": {{}}}}}}</script>'
    with pytest.raises(ParseFailure):
        catalog_from_html(html)


def test_items_not_an_array() -> None:
    html = f'{EMBEDDED_START}{{"payload": {{"tree": {{"items": {{"name": "x"}}}}}}}}</script>'
    with pytest.raises(ParseFailure):
        catalog_from_html(html)


def test_resolve_pointer() -> None:
    doc = {"a": [{"b/c": 1}, {"m~n": 2}]}
    assert resolve_pointer(doc, "") is doc
    assert resolve_pointer(doc, "/a/0/b~1c") == 1
    assert resolve_pointer(doc, "/a/1/m~0n") == 2
    with pytest.raises(ParseFailure):
        resolve_pointer(doc, "/a/5")
    with pytest.raises(ParseFailure):
        resolve_pointer(doc, "a")
