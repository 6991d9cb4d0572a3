"""
Moving the configuration file to another directory under the project root.

After `move()` returns, the in-memory location, the remembered preference and
the file on disk either all point at the new directory or all still point at
the old one.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pkgsource.services.notifications import Notifier, notify
from pkgsource.storage.location import DIRECTORY_PATH_KEY, ConfigLocation, sidecar_path
from pkgsource.storage.preferences import PreferenceStore

if TYPE_CHECKING:
    from pkgsource.services.resolver import SourceResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelocationState:
    old_directory: str
    old_file_path: Path
    old_full_path: Path


class ConfigRelocator:
    def __init__(
        self,
        location: ConfigLocation,
        preferences: PreferenceStore,
        resolver: "SourceResolver",
        notifier: Notifier,
    ):
        self.location = location
        self.preferences = preferences
        self.resolver = resolver
        self.notifier = notifier

    def _capture(self) -> RelocationState:
        return RelocationState(
            old_directory=self.location.directory_path,
            old_file_path=self.location.file_path,
            old_full_path=self.location.full_path,
        )

    def _rollback(self, state: RelocationState, copied_to: Optional[Path]) -> None:
        self.location.set_directory(state.old_directory)

        # A cross-device move that failed half way can leave a copy behind.
        if copied_to is not None and state.old_full_path.exists():
            try:
                copied_to.unlink(missing_ok=True)
            except OSError:
                logger.exception(f"Could not remove partial copy {copied_to}")

        try:
            self.preferences.set_string(DIRECTORY_PATH_KEY, state.old_directory)
        except Exception:
            logger.exception("Could not restore the config directory preference")

    def move(self, new_directory: str) -> bool:
        """
        Move the configuration file (and its sidecar, if any) into
        new_directory, relative to the project root.

        Returns False if the move failed; everything is then rolled back to
        the previous location and no exception escapes.
        """
        state = self._capture()
        copied_to: Optional[Path] = None

        try:
            # The preference is written before the filesystem is touched.
            self.location.set_directory(new_directory)
            self.preferences.set_string(DIRECTORY_PATH_KEY, new_directory)
            new_full_path = self.location.full_path
            logger.info(f"Moving config file to {new_full_path}")

            if not state.old_full_path.exists():
                # Nothing to move; load (and create) the file at the new location.
                self.resolver.reload()
                notify(self.notifier, "rescan_assets")
                return True

            if new_full_path == state.old_full_path:
                return True

            self.location.full_directory_path.mkdir(parents=True, exist_ok=True)
            if new_full_path.exists():
                raise FileExistsError(f"Config file already exists at {new_full_path}")
            copied_to = new_full_path
            shutil.move(str(state.old_full_path), str(new_full_path))
        except Exception:
            logger.exception(f"Failed to move config file from {state.old_full_path} to {new_directory!r}")
            self._rollback(state, copied_to)
            return False

        configuration = self.resolver.loaded_configuration
        if configuration is not None:
            configuration.set_file_path(str(new_full_path))

        old_sidecar = sidecar_path(state.old_full_path)
        if old_sidecar.exists():
            try:
                shutil.move(str(old_sidecar), str(sidecar_path(new_full_path)))
            except OSError:
                logger.warning(f"Could not move sidecar file {old_sidecar}", exc_info=True)

        notify(self.notifier, "rescan_assets")
        return True
