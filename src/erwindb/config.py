"""Configuration module for erwindb."""

import argparse
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Any

import toml

from .exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(name=__name__)

LOG_DIR: Path = Path.home() / ".erwindb" / "logs"
LOG_FILE: Path = LOG_DIR / "erwindb.log"

# Default configuration content
DEFAULT_CONFIG = """[general]
# Default theme (dark or light)
default_theme = "dark"

[database]
# SQLite database produced by the scraper
path = "~/.erwindb/sqlite.db"

[display]
# Answers and comments by this author are highlighted and get their own pane
distinguished_author = "erwin"
# Minimum terminal width for showing the side-by-side answer pane
dual_pane_min_width = 160

[search]
# Maximum number of semantic search results
semantic_limit = 20
"""


class Configuration:
    """A class to handle configuration values."""

    def __init__(self, exec_args=None) -> None:
        """Initialize the configuration.

        Args:
            exec_args: Command line arguments
        """
        if exec_args is None:
            arguments: list[str] = sys.argv[1:]
        else:
            arguments = exec_args

        arg_parser = argparse.ArgumentParser(
            description="A Textual app to browse a local archive of Stack Overflow questions."
        )
        config_file_location: Path = Path.home() / ".erwindb.toml"
        arg_parser.add_argument(
            "--config",
            dest="config",
            help="Path to the config file",
            default=config_file_location,
        )
        arg_parser.add_argument(
            "--create-config",
            dest="create_config",
            help="Create a default configuration file at the specified path",
            metavar="PATH",
        )
        arg_parser.add_argument(
            "--version",
            action="store_true",
            dest="version",
            help="Show version and exit",
            default=False,
        )
        arg_parser.add_argument(
            "--debug",
            action="store_true",
            dest="debug",
            help="Enable debug logging",
            default=False,
        )
        arg_parser.add_argument(
            "--info",
            action="store_true",
            dest="info",
            help="Enable info logging",
            default=False,
        )
        args: argparse.Namespace = arg_parser.parse_args(args=arguments)

        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[
                logging.FileHandler(filename=LOG_FILE, mode="a"),
            ],
        )

        if args.debug:
            logger.setLevel(level=logging.DEBUG)
            logger.debug("Debug log enabled")

        if args.info:
            logger.setLevel(level=logging.INFO)
            logger.info("Info log enabled")

        if args.version:
            try:
                version: str = metadata.version(distribution_name="erwindb")
                print(f"erwindb version: {version}")
                sys.exit(0)
            except metadata.PackageNotFoundError as e:
                print(f"Error getting version: {e}")
                sys.exit(1)

        if args.create_config:
            self.create_default_config(config_path=args.create_config)
            print(f"Created default configuration at: {args.create_config}")
            print("Please review this file before running erwindb.")
            sys.exit(0)

        self.config: dict[str, Any] = self.load_config_file(config_file=args.config)

        try:
            general_config = self.config.get("general", {})
            self.default_theme: str = general_config.get("default_theme", "dark")

            self.database_path: Path = Path(
                self.config["database"].get("path", "~/.erwindb/sqlite.db")
            ).expanduser()

            display_config = self.config.get("display", {})
            self.distinguished_author: str = display_config.get(
                "distinguished_author", "erwin"
            )
            self.dual_pane_min_width: int = int(
                display_config.get("dual_pane_min_width", 160)
            )

            search_config = self.config.get("search", {})
            self.semantic_limit: int = int(search_config.get("semantic_limit", 20))
            if self.dual_pane_min_width <= 0 or self.semantic_limit <= 0:
                raise ConfigurationError(
                    "dual_pane_min_width and semantic_limit must be positive"
                )

            try:
                self.version: str = metadata.version(distribution_name="erwindb")
            except metadata.PackageNotFoundError:
                self.version = "0.1.0"  # Default version if not installed

        except (KeyError, TypeError, ValueError, ConfigurationError) as err:
            logger.error(f"Error reading configuration: {err}")
            print(f"Error reading configuration: {err}")
            sys.exit(1)

    def load_config_file(self, config_file: str) -> dict[str, Any]:
        """Load the configuration from the TOML file.

        Args:
            config_file: Path to the config file

        Returns:
            Configuration dictionary
        """
        config_path = Path(config_file)

        try:
            if not config_path.exists():
                print(
                    f"Config file {config_file} not found. Creating with default settings."
                )
                config_path.write_text(data=DEFAULT_CONFIG)
                print(
                    f"Created {config_file} with default settings. Please review it and run erwindb again."
                )
                sys.exit(1)

            return toml.loads(s=config_path.read_text())
        except (FileNotFoundError, toml.TomlDecodeError) as err:
            logger.error(f"Error reading configuration file: {err}")
            print(f"Error reading configuration file: {err}")
            sys.exit(1)

    def create_default_config(self, config_path: str) -> None:
        """Create a default configuration file at the specified path.

        Args:
            config_path: Path where the configuration file should be created
        """
        path = Path(config_path)

        if not path.parent.exists():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Error creating directory for config file: {e}")
                print(f"Error creating directory for config file: {e}")
                sys.exit(1)

        try:
            path.write_text(data=DEFAULT_CONFIG)
        except OSError as e:
            logger.error(f"Error writing configuration file: {e}")
            print(f"Error writing configuration file: {e}")
            sys.exit(1)
