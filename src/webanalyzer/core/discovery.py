# src/webanalyzer/core/discovery.py
import importlib
import logging
from typing import Callable, Dict, Tuple

from webanalyzer.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

HANDLERS_MODULE_PATH = "webanalyzer.core.handlers"


def discover_handlers() -> Tuple[Dict[str, Callable[..., int]], Dict[str, str]]:
    """
    Scans the handlers directory, imports every *_handler.py module and returns two dictionaries:
    1. A map of command names to their handler function (handle_<command>).
    2. A map of command names to their help text (<command>_help_text).
    """
    discovered_handlers: Dict[str, Callable[..., int]] = {}
    discovered_help_texts: Dict[str, str] = {}

    handlers_dir = PathUtils.get_handlers_dir()
    logger.debug("Scanning for handlers in: '%s'", handlers_dir)

    if not handlers_dir.is_dir():
        logger.warning("Handlers directory not found: %s", handlers_dir)
        return discovered_handlers, discovered_help_texts

    for file_path in sorted(handlers_dir.glob("*_handler.py")):
        module_name = f"{HANDLERS_MODULE_PATH}.{file_path.stem}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error("Failed to load handler module %s: %s", file_path.name, e, exc_info=True)
            continue

        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if attr_name.startswith("handle_") and callable(attr):
                command_name = attr_name[len("handle_"):]
                discovered_handlers[command_name] = attr
                logger.debug("Discovered command '%s'", command_name)
            elif attr_name.endswith("_help_text") and isinstance(attr, str):
                command_name = attr_name[:-len("_help_text")]
                discovered_help_texts[command_name] = attr

    return discovered_handlers, discovered_help_texts
