from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

from pkgsource.domain.models import Package, PackageIdentifier
from pkgsource.services.resolver import SourceResolver
from pkgsource.sources.base import PackageSource


class PackageQueries:
    """
    Entry point for package lookups. Every call goes to whatever source the
    resolver currently designates, resolving it on first use.

    Queries never change resolver state. Errors raised by the underlying
    source propagate unchanged; no retries or timeouts are added here.
    """

    def __init__(self, resolver: SourceResolver):
        self.resolver = resolver

    @property
    def active_source(self) -> PackageSource:
        return self.resolver.active().source

    async def search_async(
        self,
        term: str = "",
        include_prerelease: bool = False,
        take: int = 15,
        skip: int = 0,
        cancellation: Optional[asyncio.Event] = None,
    ) -> List[Package]:
        """
        List packages from the active source(s). Partial ids, or the empty
        string (the default) to list everything.

        `cancellation` is handed to the source as-is.
        """
        return await self.active_source.search(term, include_prerelease, take, skip, cancellation)

    def get_updates(
        self,
        installed: Iterable[PackageIdentifier],
        include_prerelease: bool = False,
        target_frameworks: str = "",
        version_constraints: str = "",
    ) -> List[Package]:
        """Available updates for the installed packages."""
        return self.active_source.get_updates(
            installed, include_prerelease, target_frameworks, version_constraints
        )

    def get_specific_package(self, identifier: PackageIdentifier) -> Optional[Package]:
        return self.active_source.get_specific_package(identifier)
