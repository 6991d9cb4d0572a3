from typing import Iterable, List, Optional

from pkgsource.domain.models import Package


def match_text(value: str, term: str) -> bool:
    """
    Case-insensitive substring match. The empty term matches everything so
    that an empty search lists all packages.
    """
    return not term or term.lower() in value.lower()


def version_key(v: str) -> tuple:
    """
    Convert a version string into a sortable tuple.

    Numeric parts sort before textual ones, so "1.0.0" > "1.0.0-beta".
    """
    v_str = str(v) if v is not None else ""
    release, _, prerelease = v_str.partition("-")
    parts = []
    for part in release.split("."):
        try:
            parts.append((0, int(part)))
        except ValueError:
            parts.append((1, part))
    # A release outranks any prerelease of the same version.
    suffix = (1,) if not prerelease else (0, prerelease)
    return tuple(parts) + (suffix,)


def newest(packages: Iterable[Package]) -> Optional[Package]:
    candidates = list(packages)
    if not candidates:
        return None
    return max(candidates, key=lambda p: version_key(p.version))


def latest_per_id(packages: Iterable[Package]) -> List[Package]:
    """
    Collapse a list of packages to the highest version per package id,
    keeping the order in which ids were first seen.
    """
    best: dict = {}
    for pkg in packages:
        current = best.get(pkg.id.lower())
        if current is None or version_key(pkg.version) > version_key(current.version):
            best[pkg.id.lower()] = pkg
    return list(best.values())
