"""
Decides which package source(s) govern lookups for this session.

The resolver is a two-state machine:

* Unresolved: nothing loaded yet (or invalidated).
* Resolved(configuration, resolution): the loaded configuration and the
  ResolvedSource every query is routed to.

The first read of `configuration` or `active()` moves it to Resolved; it stays
there until `reload()` or `invalidate()`. The resolver is meant to be driven
from a single coordinating thread; concurrent reload/invalidate calls from
several threads are undefined behaviour.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

from pkgsource.core.logging_utils import apply_verbosity
from pkgsource.domain.models import (
    RESOLVED_COMPOSITE,
    RESOLVED_CONFIGURED,
    RESOLVED_SINGLE,
    Configuration,
    PackageSourceDescriptor,
    ResolvedSource,
)
from pkgsource.services.notifications import LoggingNotifier, Notifier, notify
from pkgsource.services.overrides import scan_command_line
from pkgsource.sources import CompositePackageSource, PackageSource, create_package_source
from pkgsource.storage.config_store import ConfigStore
from pkgsource.storage.location import ConfigLocation

logger = logging.getLogger(__name__)

SourceFactory = Callable[[PackageSourceDescriptor, Configuration], PackageSource]


def default_source_factory(descriptor: PackageSourceDescriptor, configuration: Configuration) -> PackageSource:
    return create_package_source(descriptor, timeout=configuration.request_timeout_seconds)


def _build(
    descriptors: List[PackageSourceDescriptor],
    configuration: Configuration,
    source_factory: SourceFactory,
) -> PackageSource:
    if len(descriptors) == 1:
        return source_factory(descriptors[0], configuration)
    return CompositePackageSource(source_factory(d, configuration) for d in descriptors)


def resolve(
    configuration: Configuration,
    overrides: Sequence[PackageSourceDescriptor],
    source_factory: SourceFactory = default_source_factory,
) -> ResolvedSource:
    """
    Pick the active source. Overrides always win over the configuration:
    one override is used directly, several are combined in scan order, none
    falls back to the configuration's designated source(s).

    Any override forces install_from_cache off so a stale local cache cannot
    mask the forced source.
    """
    overrides = list(overrides)
    if overrides:
        configuration.set_install_from_cache(False)

    if len(overrides) == 1:
        return ResolvedSource(
            RESOLVED_SINGLE, (overrides[0],), source_factory(overrides[0], configuration)
        )
    if len(overrides) > 1:
        return ResolvedSource(
            RESOLVED_COMPOSITE,
            tuple(overrides),
            CompositePackageSource(source_factory(d, configuration) for d in overrides),
        )

    designated = configuration.designated_sources()
    return ResolvedSource(
        RESOLVED_CONFIGURED, tuple(designated), _build(designated, configuration, source_factory)
    )


@dataclass(frozen=True)
class Unresolved:
    pass


@dataclass(frozen=True)
class Resolved:
    configuration: Configuration
    resolution: ResolvedSource


ResolverState = Union[Unresolved, Resolved]


class SourceResolver:
    def __init__(
        self,
        location: ConfigLocation,
        store: ConfigStore,
        notifier: Optional[Notifier] = None,
        args: Optional[Sequence[str]] = None,
        source_factory: SourceFactory = default_source_factory,
    ):
        self.location = location
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.args: List[str] = list(sys.argv if args is None else args)
        self.source_factory = source_factory
        self._state: ResolverState = Unresolved()
        self._previous: Optional[ResolvedSource] = None

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def is_resolved(self) -> bool:
        return isinstance(self._state, Resolved)

    @property
    def loaded_configuration(self) -> Optional[Configuration]:
        """The configuration if already loaded, without triggering a load."""
        if isinstance(self._state, Resolved):
            return self._state.configuration
        return None

    @property
    def configuration(self) -> Configuration:
        return self._ensure_resolved().configuration

    def active(self) -> ResolvedSource:
        return self._ensure_resolved().resolution

    def _ensure_resolved(self) -> Resolved:
        if not isinstance(self._state, Resolved):
            self.reload()
        return self._state

    def reload(self) -> ResolvedSource:
        """
        Load the configuration from its current location, rescan the
        command line and resolve the active source again.
        """
        configuration = self.store.load_or_create(self.location.full_path)
        apply_verbosity(configuration)

        overrides = scan_command_line(self.args)
        resolution = resolve(configuration, overrides, self.source_factory)
        self._state = Resolved(configuration, resolution)
        logger.debug(f"Active package source: {resolution.describe()}")

        if resolution != self._previous:
            notify(self.notifier, "reinitialize_plugins")
        self._previous = resolution
        return resolution

    def invalidate(self) -> None:
        self._state = Unresolved()
