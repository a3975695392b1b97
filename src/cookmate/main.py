"""Main application entry point for CookMate."""

import logging
import sys

import uvicorn

from cookmate.api import create_app
from cookmate.utils.config import setup_logging, load_config, validate_config

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    config = load_config()
    setup_logging(config.get("log_level", "INFO"), config.get("log_file"))
    logger.info("Starting CookMate...")

    for error in validate_config(config):
        logger.warning(f"Configuration problem: {error}")

    try:
        app = create_app(config)
        uvicorn.run(app, host=config["host"], port=config["port"], log_config=None)
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
