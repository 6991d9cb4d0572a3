import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """
    Hooks into host subsystems that depend on the active source or on the
    files under the project root.
    """

    @abstractmethod
    def reinitialize_plugins(self) -> None:
        """The active source changed; plugins holding source state must reset."""
        pass

    @abstractmethod
    def rescan_assets(self) -> None:
        """Files under the project root were added or moved."""
        pass


class LoggingNotifier(Notifier):
    def reinitialize_plugins(self) -> None:
        logger.debug("Reinitializing plugins")

    def rescan_assets(self) -> None:
        logger.debug("Rescanning assets")


def notify(notifier: Notifier, hook: str) -> None:
    """
    Fire-and-forget call into a notifier hook. Failures in the host subsystem
    are logged and never reach the caller.
    """
    try:
        getattr(notifier, hook)()
    except Exception:
        logger.exception(f"Notification hook {hook} failed")
