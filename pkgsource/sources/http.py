"""
Package source for a remote registry speaking the NuGet v3 JSON protocol.

The location is the service index URL (e.g. https://api.nuget.org/v3/index.json);
queries go to the SearchQueryService resource it advertises.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from pkgsource.domain.models import Package, PackageIdentifier
from pkgsource.domain.utils import version_key
from pkgsource.sources.base import PackageSource, raise_if_cancelled

logger = logging.getLogger(__name__)

SEARCH_RESOURCE_TYPE = "SearchQueryService"
SEM_VER_LEVEL = "2.0.0"


class HttpPackageSource(PackageSource):
    def __init__(
        self,
        name: str,
        index_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.name = name
        self.index_url = index_url
        self.timeout = timeout
        self._auth = httpx.BasicAuth(username, password or "") if username is not None else None
        self._transport = transport
        self._search_url: Optional[str] = None

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "follow_redirects": True,
            "timeout": self.timeout,
            "auth": self._auth,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    def _search_url_from_index(self, index: Dict[str, Any]) -> str:
        for resource in index.get("resources", []):
            if str(resource.get("@type", "")).startswith(SEARCH_RESOURCE_TYPE):
                return resource["@id"]
        raise ValueError(f"Package source {self.name} at {self.index_url} has no {SEARCH_RESOURCE_TYPE}")

    def _to_package(self, item: Dict[str, Any], version: Optional[str] = None) -> Package:
        authors = item.get("authors") or []
        if isinstance(authors, str):
            authors = [a.strip() for a in authors.split(",") if a.strip()]
        return Package(
            id=item["id"],
            version=version or item.get("version", ""),
            title=item.get("title") or item["id"],
            description=item.get("description"),
            authors=authors,
            source_name=self.name,
            download_url=item.get("@id"),
        )

    @staticmethod
    def _search_params(term: str, include_prerelease: bool, take: int, skip: int) -> Dict[str, Any]:
        return {
            "q": term,
            "skip": skip,
            "take": take,
            "prerelease": "true" if include_prerelease else "false",
            "semVerLevel": SEM_VER_LEVEL,
        }

    async def search(
        self,
        term: str = "",
        include_prerelease: bool = False,
        take: int = 15,
        skip: int = 0,
        cancellation: Optional[asyncio.Event] = None,
    ) -> List[Package]:
        raise_if_cancelled(cancellation)
        async with httpx.AsyncClient(**self._client_kwargs()) as client:
            if self._search_url is None:
                response = await client.get(self.index_url)
                response.raise_for_status()
                self._search_url = self._search_url_from_index(response.json())
                raise_if_cancelled(cancellation)

            logger.debug(f"Searching {self.name} for '{term}' (skip={skip}, take={take})")
            response = await client.get(
                self._search_url,
                params=self._search_params(term, include_prerelease, take, skip),
            )
            response.raise_for_status()

        raise_if_cancelled(cancellation)
        return [self._to_package(item) for item in response.json().get("data", [])]

    def _find_entry(self, client: httpx.Client, package_id: str) -> Optional[Dict[str, Any]]:
        if self._search_url is None:
            response = client.get(self.index_url)
            response.raise_for_status()
            self._search_url = self._search_url_from_index(response.json())

        response = client.get(
            self._search_url,
            params=self._search_params(f"packageid:{package_id}", True, 1, 0),
        )
        response.raise_for_status()
        for item in response.json().get("data", []):
            if item.get("id", "").lower() == package_id.lower():
                return item
        return None

    @staticmethod
    def _versions_of(entry: Dict[str, Any]) -> List[str]:
        versions = [v["version"] for v in entry.get("versions", []) if v.get("version")]
        return versions or [entry.get("version", "")]

    def get_updates(
        self,
        installed: Iterable[PackageIdentifier],
        include_prerelease: bool = False,
        target_frameworks: str = "",
        version_constraints: str = "",
    ) -> List[Package]:
        updates: List[Package] = []
        with httpx.Client(**self._client_kwargs()) as client:
            for current in installed:
                entry = self._find_entry(client, current.id)
                if entry is None:
                    continue
                versions = [
                    v for v in self._versions_of(entry) if include_prerelease or "-" not in v
                ]
                if not versions:
                    continue
                latest = max(versions, key=version_key)
                if version_key(latest) > version_key(current.version):
                    updates.append(self._to_package(entry, latest))
        return updates

    def get_specific_package(self, identifier: PackageIdentifier) -> Optional[Package]:
        with httpx.Client(**self._client_kwargs()) as client:
            entry = self._find_entry(client, identifier.id)
        if entry is None:
            return None

        versions = self._versions_of(entry)
        if not identifier.version:
            return self._to_package(entry, max(versions, key=version_key))
        for v in versions:
            if v.lower() == identifier.version.lower():
                return self._to_package(entry, v)
        return None
