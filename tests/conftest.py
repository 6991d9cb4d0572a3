"""Shared fixtures for pkgsource tests."""

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional

import pytest

from pkgsource.core.dependencies import create_services
from pkgsource.domain.models import Configuration, Package, PackageIdentifier, PackageSourceDescriptor
from pkgsource.services.notifications import Notifier
from pkgsource.sources.base import PackageSource
from pkgsource.storage.config_store import JsonConfigStore
from pkgsource.storage.preferences import InMemoryPreferenceStore


class RecordingNotifier(Notifier):
    def __init__(self):
        self.calls: List[str] = []

    def reinitialize_plugins(self) -> None:
        self.calls.append("reinitialize_plugins")

    def rescan_assets(self) -> None:
        self.calls.append("rescan_assets")


class FakeSource(PackageSource):
    """In-memory source that records what it was asked."""

    def __init__(self, name: str, packages: Optional[List[Package]] = None, location: str = ""):
        self.name = name
        self.location = location
        self.packages = packages or []
        self.search_calls = []
        self.update_calls = []

    async def search(self, term="", include_prerelease=False, take=15, skip=0, cancellation=None):
        self.search_calls.append((term, include_prerelease, take, skip, cancellation))
        if cancellation is not None and cancellation.is_set():
            raise asyncio.CancelledError()
        return [p for p in self.packages if term.lower() in p.id.lower()][skip : skip + take]

    def get_updates(self, installed, include_prerelease=False, target_frameworks="", version_constraints=""):
        installed = list(installed)
        self.update_calls.append((installed, include_prerelease, target_frameworks, version_constraints))
        ids = {i.id for i in installed}
        return [p for p in self.packages if p.id in ids]

    def get_specific_package(self, identifier: PackageIdentifier):
        for p in self.packages:
            if p.id == identifier.id and (not identifier.version or p.version == identifier.version):
                return p
        return None


def fake_source_factory(descriptor: PackageSourceDescriptor, configuration: Configuration) -> FakeSource:
    return FakeSource(descriptor.name, location=descriptor.location)


class CountingConfigStore(JsonConfigStore):
    def __init__(self):
        self.loads = 0

    def load_or_create(self, full_path: Path) -> Configuration:
        self.loads += 1
        return super().load_or_create(full_path)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def preferences() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture
def store() -> CountingConfigStore:
    return CountingConfigStore()


@pytest.fixture
def make_services(project_root, preferences, store, notifier):
    def _make(args: Iterable[str] = ()):
        return create_services(
            project_root=project_root,
            args=list(args),
            preferences=preferences,
            store=store,
            notifier=notifier,
            source_factory=fake_source_factory,
        )

    return _make


@pytest.fixture
def services(make_services):
    return make_services()
