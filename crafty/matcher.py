"""Archive filename grammar and catalog lookups.

Every package archive in the listing is named::

    [archcraft-]<name>-<version>-<release>-<arch>.pkg.tar.zst

``<name>`` may itself contain hyphens, so it is everything in front of the
trailing ``-version-release-arch.pkg.tar.zst``. Entries that do not follow
this grammar are not packages and are ignored by all lookups below.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from .config import ARCHITECTURES, PACKAGE_PREFIX

ARCHIVE_SUFFIX = ".pkg.tar.zst"

_PREFIX = rf"(?:(?P<prefix>{re.escape(PACKAGE_PREFIX)})-)?"
_TAIL = (
    r"-(?P<version>\d+(?:\.\d+)*)"
    r"-(?P<release>\d+)"
    rf"-(?P<arch>{'|'.join(re.escape(a) for a in ARCHITECTURES)})"
    rf"{re.escape(ARCHIVE_SUFFIX)}"
)


def archive_pattern(name: Optional[str] = None) -> Pattern[str]:
    """Compile the archive grammar, optionally pinned to one literal name."""
    name_re = ".+" if name is None else re.escape(name)
    return re.compile(rf"^{_PREFIX}(?P<name>{name_re}){_TAIL}$")


ARCHIVE_RE = archive_pattern()


@dataclass(frozen=True)
class PackageArchive:
    filename: str
    name: str
    version: str
    release: int
    arch: str
    prefix: Optional[str] = None

    @property
    def pkgname(self) -> str:
        """Name including the distribution prefix, as pacman knows it."""
        return f"{self.prefix}-{self.name}" if self.prefix else self.name

    def with_version(self, version: str, release: int) -> "PackageArchive":
        filename = f"{self.pkgname}-{version}-{release}-{self.arch}{ARCHIVE_SUFFIX}"
        return PackageArchive(filename, self.name, version, release, self.arch, self.prefix)


def parse_archive(filename: str) -> Optional[PackageArchive]:
    match = ARCHIVE_RE.match(filename)
    if not match:
        return None
    return PackageArchive(
        filename=filename,
        name=match.group("name"),
        version=match.group("version"),
        release=int(match.group("release")),
        arch=match.group("arch"),
        prefix=match.group("prefix"),
    )


def is_archive(filename: str) -> bool:
    return ARCHIVE_RE.match(filename) is not None


def extract_name(filename: str) -> Optional[str]:
    """Logical package name of an archive filename, or None."""
    archive = parse_archive(filename)
    return archive.name if archive else None


def iter_archives(catalog: Iterable[str]):
    for entry in catalog:
        archive = parse_archive(entry)
        if archive is not None:
            yield archive


# ============================================================================
# Catalog lookups
# ============================================================================

def resolve_exact(catalog: Iterable[str], package_name: str) -> Optional[str]:
    """Return the archive filename for ``package_name``, or None.

    The first entry in catalog order wins. When several versions or
    architectures of the same package are listed this is not necessarily
    the newest one.
    """
    pattern = archive_pattern(package_name)
    for entry in catalog:
        if pattern.match(entry):
            return entry
    return None


def filter_by_keyword(catalog: Iterable[str], keyword: str) -> List[str]:
    """Archives whose full package name contains ``keyword``, ignoring case."""
    needle = keyword.lower()
    return [a.filename for a in iter_archives(catalog) if needle in a.pkgname.lower()]


def list_all(catalog: Iterable[str]) -> List[str]:
    return [a.filename for a in iter_archives(catalog)]
