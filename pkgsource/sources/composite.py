from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Iterator, List, Optional

from pkgsource.domain.models import Package, PackageIdentifier
from pkgsource.domain.utils import latest_per_id
from pkgsource.sources.base import PackageSource

logger = logging.getLogger(__name__)


class CompositePackageSource(PackageSource):
    """
    Fans every query out over an ordered list of sources and merges the results.

    Iteration yields the underlying sources in the order they were given.
    """

    def __init__(self, sources: Iterable[PackageSource], name: str = "composite"):
        self.name = name
        self.sources: List[PackageSource] = list(sources)

    def __iter__(self) -> Iterator[PackageSource]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)

    async def search(
        self,
        term: str = "",
        include_prerelease: bool = False,
        take: int = 15,
        skip: int = 0,
        cancellation: Optional[asyncio.Event] = None,
    ) -> List[Package]:
        results = await asyncio.gather(
            *(
                source.search(term, include_prerelease, take, skip, cancellation)
                for source in self.sources
            )
        )

        merged: List[Package] = []
        seen = set()
        for packages in results:
            for pkg in packages:
                key = pkg.id.lower()
                if key in seen:
                    continue
                seen.add(key)
                merged.append(pkg)
        return merged[:take]

    def get_updates(
        self,
        installed: Iterable[PackageIdentifier],
        include_prerelease: bool = False,
        target_frameworks: str = "",
        version_constraints: str = "",
    ) -> List[Package]:
        installed = list(installed)
        updates: List[Package] = []
        for source in self.sources:
            updates.extend(
                source.get_updates(installed, include_prerelease, target_frameworks, version_constraints)
            )
        return latest_per_id(updates)

    def get_specific_package(self, identifier: PackageIdentifier) -> Optional[Package]:
        for source in self.sources:
            pkg = source.get_specific_package(identifier)
            if pkg is not None:
                logger.debug(f"Found {identifier.id} {identifier.version} in {source.name}")
                return pkg
        return None
