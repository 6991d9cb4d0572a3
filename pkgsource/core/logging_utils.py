import logging

from pkgsource.domain.models import Configuration

PACKAGE_LOGGER = "pkgsource"


def apply_verbosity(configuration: Configuration) -> None:
    """
    Follow the configuration's verbose flag: DEBUG for the whole package when
    set, otherwise inherit whatever level the host configured.
    """
    level = logging.DEBUG if configuration.verbose else logging.NOTSET
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
