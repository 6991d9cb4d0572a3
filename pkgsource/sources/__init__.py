"""
Package sources: the capability consumed by queries, the concrete local and
HTTP implementations, and the composite that fans out over several of them.
"""
from __future__ import annotations

from typing import Optional

import httpx

from pkgsource.domain.models import PackageSourceDescriptor
from pkgsource.sources.base import PackageSource
from pkgsource.sources.composite import CompositePackageSource
from pkgsource.sources.http import HttpPackageSource
from pkgsource.sources.local import LocalPackageSource


def create_package_source(
    descriptor: PackageSourceDescriptor,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> PackageSource:
    """
    Build the concrete source for a descriptor: http(s) locations become remote
    registries, anything else is treated as a local directory.
    """
    if descriptor.is_remote:
        return HttpPackageSource(
            descriptor.name,
            descriptor.location,
            username=descriptor.username,
            password=descriptor.password,
            timeout=timeout,
            transport=transport,
        )
    return LocalPackageSource(descriptor.name, descriptor.location)


__all__ = [
    "CompositePackageSource",
    "HttpPackageSource",
    "LocalPackageSource",
    "PackageSource",
    "create_package_source",
]
