"""
Package sources forced on the command line:

    <host> -Source https://my.feed/v3/index.json ./local-packages

Every token after a -Source marker that does not start with '-' is a source
location; the next flag ends the list. Markers may repeat and accumulate.
"""
import enum
import logging
from typing import List, Sequence

from pkgsource.domain.models import CMD_LINE_SOURCE_PREFIX, PackageSourceDescriptor

logger = logging.getLogger(__name__)

SOURCE_MARKER = "-source"
FLAG_PREFIX = "-"


class ScanState(enum.Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


def scan_command_line(args: Sequence[str]) -> List[PackageSourceDescriptor]:
    sources: List[PackageSourceDescriptor] = []
    state = ScanState.IDLE

    for arg in args:
        if arg.startswith(FLAG_PREFIX):
            state = ScanState.COLLECTING if arg.lower() == SOURCE_MARKER else ScanState.IDLE
            continue

        if state is ScanState.COLLECTING:
            source = PackageSourceDescriptor(
                name=f"{CMD_LINE_SOURCE_PREFIX}{len(sources)}",
                location=arg,
            )
            logger.debug(f"Adding command line package source {source.name} at {arg}")
            sources.append(source)

    return sources
