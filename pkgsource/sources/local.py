"""
Package source backed by a local directory (or network share) of .nupkg files.

Expected layout: <directory>/<package id>.<version>.nupkg
"""
from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

import aiofiles.os

from pkgsource.domain.models import Package, PackageIdentifier
from pkgsource.domain.utils import latest_per_id, match_text, newest, version_key
from pkgsource.sources.base import PackageSource, raise_if_cancelled

logger = logging.getLogger(__name__)

PACKAGE_FILE_PATTERN = re.compile(
    r"^(?P<id>.+?)\.(?P<version>\d+(?:\.\d+)*(?:-[0-9A-Za-z.\-]+)?)\.nupkg$",
    re.IGNORECASE,
)


class LocalPackageSource(PackageSource):
    def __init__(self, name: str, directory: Path):
        self.name = name
        self.directory = Path(directory).expanduser()

    def _package_from_file_name(self, file_name: str) -> Optional[Package]:
        match = PACKAGE_FILE_PATTERN.match(file_name)
        if not match:
            return None
        return Package(
            id=match.group("id"),
            version=match.group("version"),
            title=match.group("id"),
            source_name=self.name,
            download_url=(self.directory / file_name).as_uri() if self.directory.is_absolute() else None,
        )

    def _packages_from_names(self, names: Iterable[str]) -> List[Package]:
        packages = []
        for file_name in sorted(names):
            pkg = self._package_from_file_name(file_name)
            if pkg is not None:
                packages.append(pkg)
        return packages

    def _all_packages(self) -> List[Package]:
        if not self.directory.is_dir():
            logger.warning(f"Local package source {self.name} does not exist: {self.directory}")
            return []
        return self._packages_from_names(p.name for p in self.directory.iterdir() if p.is_file())

    def _versions_of(self, package_id: str, include_prerelease: bool = True) -> List[Package]:
        return [
            p
            for p in self._all_packages()
            if p.id.lower() == package_id.lower() and (include_prerelease or not p.is_prerelease)
        ]

    async def search(
        self,
        term: str = "",
        include_prerelease: bool = False,
        take: int = 15,
        skip: int = 0,
        cancellation: Optional[asyncio.Event] = None,
    ) -> List[Package]:
        raise_if_cancelled(cancellation)
        if not await aiofiles.os.path.isdir(self.directory):
            logger.warning(f"Local package source {self.name} does not exist: {self.directory}")
            return []

        names = await aiofiles.os.listdir(self.directory)
        raise_if_cancelled(cancellation)

        matches = [
            p
            for p in self._packages_from_names(names)
            if match_text(p.id, term) and (include_prerelease or not p.is_prerelease)
        ]
        return latest_per_id(matches)[skip : skip + take]

    def get_updates(
        self,
        installed: Iterable[PackageIdentifier],
        include_prerelease: bool = False,
        target_frameworks: str = "",
        version_constraints: str = "",
    ) -> List[Package]:
        updates: List[Package] = []
        for current in installed:
            candidate = newest(self._versions_of(current.id, include_prerelease))
            if candidate is not None and version_key(candidate.version) > version_key(current.version):
                updates.append(candidate)
        return updates

    def get_specific_package(self, identifier: PackageIdentifier) -> Optional[Package]:
        versions = self._versions_of(identifier.id)
        if not identifier.version:
            return newest(versions)
        for pkg in versions:
            if pkg.version.lower() == identifier.version.lower():
                return pkg
        return None
