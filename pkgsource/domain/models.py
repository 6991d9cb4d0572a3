from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, model_validator


CMD_LINE_SOURCE_PREFIX = "CMD_LINE_SRC_"

DEFAULT_SOURCE_NAME = "nuget.org"
DEFAULT_SOURCE_LOCATION = "https://api.nuget.org/v3/index.json"


class PackageSourceDescriptor(BaseModel):
    """
    A named package repository entry from the configuration file
    (or synthesized from the command line).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    location: str = Field(description="URL of a remote registry or path to a local directory.")
    username: Optional[str] = None
    password: Optional[str] = None
    enabled: bool = True

    @property
    def is_remote(self) -> bool:
        return urlparse(self.location).scheme in ("http", "https")


def _default_sources() -> List[PackageSourceDescriptor]:
    return [PackageSourceDescriptor(name=DEFAULT_SOURCE_NAME, location=DEFAULT_SOURCE_LOCATION)]


class Configuration(BaseModel):
    """
    Persisted settings that govern where packages are looked up.
    Persisted at: <PROJECT_ROOT>/<config directory>/packages.config.json

    Mutate through the set_* / add_* / remove_* methods only; they keep the
    "zero or one active source" invariant intact.
    """

    # Absolute path of the backing file. Filled in by the config store and
    # excluded from JSON persistence so the file does not carry its own location.
    file_path: str = Field(default="", exclude=True)

    verbose: bool = Field(
        default=False,
        description="Log verbose diagnostics while loading and resolving sources.",
    )
    install_from_cache: bool = Field(
        default=True,
        description="Install packages from the local cache when possible.",
    )
    request_timeout_seconds: int = Field(
        default=10,
        ge=1,
        description="Timeout applied to requests made against remote package sources.",
    )
    package_sources: List[PackageSourceDescriptor] = Field(default_factory=_default_sources)
    active_package_source: Optional[str] = Field(
        default=None,
        description="Name of the source used for queries. None aggregates all enabled sources.",
    )

    @model_validator(mode="after")
    def _check_sources(self) -> "Configuration":
        names = [s.name for s in self.package_sources]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate package source names: {', '.join(duplicates)}")
        if self.active_package_source is not None and self.active_package_source not in names:
            raise ValueError(f"Active package source '{self.active_package_source}' is not defined")
        return self

    def get_source(self, name: str) -> Optional[PackageSourceDescriptor]:
        for source in self.package_sources:
            if source.name == name:
                return source
        return None

    def designated_sources(self) -> List[PackageSourceDescriptor]:
        """
        The descriptors that govern queries when no override applies: the
        active source if one is designated, otherwise every enabled source.
        """
        if self.active_package_source is not None:
            return [self.get_source(self.active_package_source)]
        return [s for s in self.package_sources if s.enabled]

    def set_file_path(self, file_path: str) -> None:
        self.file_path = file_path

    def set_install_from_cache(self, install_from_cache: bool) -> None:
        self.install_from_cache = install_from_cache

    def set_active_source(self, name: Optional[str]) -> None:
        if name is not None and self.get_source(name) is None:
            raise ValueError(f"Package source '{name}' is not defined")
        self.active_package_source = name

    def add_source(self, source: PackageSourceDescriptor) -> None:
        if self.get_source(source.name) is not None:
            raise ValueError(f"Package source '{source.name}' already exists")
        self.package_sources.append(source)

    def remove_source(self, name: str) -> None:
        source = self.get_source(name)
        if source is None:
            raise ValueError(f"Package source '{name}' is not defined")
        self.package_sources.remove(source)
        if self.active_package_source == name:
            self.active_package_source = None


class PackageIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    version: str = ""

    @property
    def is_prerelease(self) -> bool:
        return "-" in self.version


class Package(PackageIdentifier):
    """
    A package as reported by a package source.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    authors: List[str] = Field(default_factory=list)
    source_name: Optional[str] = None
    download_url: Optional[str] = None


RESOLVED_SINGLE = "single"
RESOLVED_COMPOSITE = "composite"
RESOLVED_CONFIGURED = "configured"


@dataclass(frozen=True)
class ResolvedSource:
    """
    The run-time decision of which source(s) subsequent queries go to.
    """

    kind: str
    descriptors: Tuple[PackageSourceDescriptor, ...]
    source: Any = field(compare=False)

    @property
    def names(self) -> List[str]:
        return [d.name for d in self.descriptors]

    def describe(self) -> str:
        return f"{self.kind} [{', '.join(f'{d.name}={d.location}' for d in self.descriptors)}]"
