import asyncio
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from pkgsource.domain.models import Package, PackageIdentifier


class PackageSource(ABC):
    """
    Abstract base class for a queryable package repository.
    """

    name: str

    @abstractmethod
    async def search(
        self,
        term: str = "",
        include_prerelease: bool = False,
        take: int = 15,
        skip: int = 0,
        cancellation: Optional[asyncio.Event] = None,
    ) -> List[Package]:
        """
        Search packages by (partial) id. The empty term lists all packages.
        Implementations observe `cancellation` cooperatively.
        """
        pass

    @abstractmethod
    def get_updates(
        self,
        installed: Iterable[PackageIdentifier],
        include_prerelease: bool = False,
        target_frameworks: str = "",
        version_constraints: str = "",
    ) -> List[Package]:
        """Return newer versions available for the given installed packages."""
        pass

    @abstractmethod
    def get_specific_package(self, identifier: PackageIdentifier) -> Optional[Package]:
        """Return the exact package (or the newest one when no version is given), or None."""
        pass


def raise_if_cancelled(cancellation: Optional[asyncio.Event]) -> None:
    if cancellation is not None and cancellation.is_set():
        raise asyncio.CancelledError()
