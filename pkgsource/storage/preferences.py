import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class PreferenceStore(ABC):
    """
    Host key -> string map that outlives the process.
    """

    @abstractmethod
    def get_string(self, key: str, default: str = "") -> str:
        pass

    @abstractmethod
    def set_string(self, key: str, value: str) -> None:
        pass


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(values or {})

    def get_string(self, key: str, default: str = "") -> str:
        return self.values.get(key, default)

    def set_string(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonPreferenceStore(PreferenceStore):
    """
    Preferences persisted as a flat JSON object; every set is written through.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._values: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values
        if self.path.exists():
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                self._values = {str(k): str(v) for k, v in raw.items()}
            except (ValueError, AttributeError) as e:
                # Preferences are a convenience; a broken file falls back to defaults.
                logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
                self._values = {}
        else:
            self._values = {}
        return self._values

    def get_string(self, key: str, default: str = "") -> str:
        return self._load().get(key, default)

    def set_string(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")
