import asyncio
import logging
import sys
from typing import List, Optional

from pkgsource.core.dependencies import create_services

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Resolve the active package source for this invocation and print the
    first page of packages it offers.
    """
    services = create_services(args=sys.argv if argv is None else argv)

    resolution = services.resolver.active()
    logger.info(f"Config file: {services.location.full_path}")
    logger.info(f"Active package source: {resolution.describe()}")

    packages = asyncio.run(services.queries.search_async())
    for pkg in packages:
        print(f"{pkg.id} {pkg.version}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
