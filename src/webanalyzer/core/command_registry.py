# src/webanalyzer/core/command_registry.py
import logging
from typing import Callable, Dict

from webanalyzer.core.discovery import discover_handlers

logger = logging.getLogger(__name__)

# The central registries, populated by register_all_commands().
CommandRegistry: Dict[str, Callable[..., int]] = {}
COMMAND_HELP_TEXTS: Dict[str, str] = {}


def register_command(name: str, handler: Callable[..., int]) -> None:
    """Adds a command and its handler function to the registry."""
    CommandRegistry[name] = handler
    logger.debug("Registered command '%s'", name)


def register_all_commands() -> None:
    """Discovers all handlers and help texts, then registers them."""
    discovered_handlers, discovered_help_texts = discover_handlers()

    for name, handler in discovered_handlers.items():
        if name not in CommandRegistry:
            register_command(name, handler)

    COMMAND_HELP_TEXTS.update(discovered_help_texts)
    logger.debug("Registered %d command handlers.", len(CommandRegistry))
