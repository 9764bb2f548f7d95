"""Main entry point for erwindb."""

import logging
import sys

from .config import LOG_FILE
from .exceptions import StorageError
from .ui.app import ErwinDBApp


def main() -> None:
    """Main entry point for erwindb."""
    logger: logging.Logger = logging.getLogger(name="erwindb.main")

    try:
        app = ErwinDBApp()
        app.run()
    except KeyboardInterrupt:
        logger.info(msg="Application terminated by user (Ctrl+C)")
        print("\nExiting erwindb...")
    except StorageError as e:
        logger.exception(msg=f"Error opening database: {e}")
        print(f"Error: {e}")
        print("Set [database] path in your config file to the scraped database.")
        sys.exit(1)
    except Exception as e:
        logger.exception(msg=f"Error: {e}")
        print(f"Error: {e}")
        print(f"See logs for details (at {LOG_FILE})")
        sys.exit(1)


if __name__ == "__main__":
    main()
