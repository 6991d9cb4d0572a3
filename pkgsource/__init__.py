"""
pkgsource decides which package repository (or combination of repositories)
answers package searches, update checks and lookups.

It merges a persisted configuration file with package sources forced on the
command line, keeps the resolution cached for the session, and can relocate
the configuration file with rollback on failure.
"""

from .core.dependencies import Services, create_services
from .domain.models import Configuration, Package, PackageIdentifier, PackageSourceDescriptor, ResolvedSource
from .services.overrides import scan_command_line
from .services.queries import PackageQueries
from .services.resolver import SourceResolver, resolve
from .storage.relocator import ConfigRelocator

__all__ = [
    "ConfigRelocator",
    "Configuration",
    "Package",
    "PackageIdentifier",
    "PackageQueries",
    "PackageSourceDescriptor",
    "ResolvedSource",
    "Services",
    "SourceResolver",
    "create_services",
    "resolve",
    "scan_command_line",
]
