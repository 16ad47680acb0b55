"""
Initialize Schema Script
This script creates or updates the Parse classes, roles and class-level
permissions of the application. Safe to run repeatedly, e.g. after every deploy.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from ahope.config.settings import settings
from ahope.core.logging_config import configure_logging
from ahope.modules.bootstrap.service import initialize_application_data

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Main function to initialize schemas, roles and permissions"""
    parser = argparse.ArgumentParser(description="Initialize the AHOPE Parse schema")
    parser.add_argument(
        "--local-url",
        default=None,
        help="Reach Parse Server through this URL instead of the configured server URL",
    )
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    try:
        logger.info("Starting schema initialization...")
        result = asyncio.run(initialize_application_data(settings.parse_server_config(), args.local_url))
        for state in result.schemas:
            logger.info(f"Class '{state.class_name}': {state.action.value}")
        logger.info("Schema initialization completed.")
    except Exception as e:
        logger.error(f"Schema initialization failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
