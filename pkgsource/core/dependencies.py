from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pkgsource.core.settings import get_preferences_path, get_project_root
from pkgsource.services.notifications import LoggingNotifier, Notifier
from pkgsource.services.queries import PackageQueries
from pkgsource.services.resolver import SourceResolver, SourceFactory, default_source_factory
from pkgsource.storage.config_store import ConfigStore, JsonConfigStore
from pkgsource.storage.location import ConfigLocation
from pkgsource.storage.preferences import JsonPreferenceStore, PreferenceStore
from pkgsource.storage.relocator import ConfigRelocator


@dataclass
class Services:
    """
    Everything a host needs, wired together. One instance per session.
    """

    location: ConfigLocation
    preferences: PreferenceStore
    store: ConfigStore
    notifier: Notifier
    resolver: SourceResolver
    relocator: ConfigRelocator
    queries: PackageQueries


def create_services(
    project_root: Optional[Path] = None,
    args: Optional[Sequence[str]] = None,
    preferences: Optional[PreferenceStore] = None,
    store: Optional[ConfigStore] = None,
    notifier: Optional[Notifier] = None,
    source_factory: SourceFactory = default_source_factory,
) -> Services:
    project_root = project_root or get_project_root()
    preferences = preferences or JsonPreferenceStore(get_preferences_path())
    store = store or JsonConfigStore()
    notifier = notifier or LoggingNotifier()

    location = ConfigLocation.from_preferences(project_root, preferences)
    resolver = SourceResolver(location, store, notifier, args=args, source_factory=source_factory)
    return Services(
        location=location,
        preferences=preferences,
        store=store,
        notifier=notifier,
        resolver=resolver,
        relocator=ConfigRelocator(location, preferences, resolver, notifier),
        queries=PackageQueries(resolver),
    )
