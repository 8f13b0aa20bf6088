# src/webanalyzer/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    Paths are resolved relative to this file so they hold for source checkouts and installs alike.
    """

    @staticmethod
    def get_package_root() -> Path:
        """Returns the absolute path of the installed 'webanalyzer' package."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_handlers_dir() -> Path:
        return PathUtils.get_package_root() / "core" / "handlers"

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"
