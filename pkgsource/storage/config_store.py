import logging
from abc import ABC, abstractmethod
from pathlib import Path

from pkgsource.domain.models import Configuration

logger = logging.getLogger(__name__)


class ConfigStore(ABC):
    """
    Abstract base class for loading and persisting the Configuration.
    """

    @abstractmethod
    def load_or_create(self, full_path: Path) -> Configuration:
        """
        Parse the configuration at full_path, or create and persist the
        defaults when no file exists there yet.
        """
        pass

    @abstractmethod
    def save(self, configuration: Configuration) -> None:
        """Persist the configuration at its own file_path."""
        pass


class JsonConfigStore(ConfigStore):
    """
    Configuration persisted as pydantic JSON. No caching happens here; every
    call reads the file again.
    """

    def load_or_create(self, full_path: Path) -> Configuration:
        full_path = Path(full_path)
        if full_path.exists():
            # Parse errors (malformed JSON or invalid settings) are fatal for the
            # caller and propagate as pydantic.ValidationError.
            config = Configuration.model_validate_json(full_path.read_text(encoding="utf-8"))
            config.set_file_path(str(full_path))
            return config

        logger.info(f"No config file found. Creating default at {full_path}")
        config = Configuration(file_path=str(full_path))
        self.save(config)
        return config

    def save(self, configuration: Configuration) -> None:
        if not configuration.file_path:
            raise ValueError("Configuration has no file path")
        path = Path(configuration.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(configuration.model_dump_json(indent=2), encoding="utf-8")
