"""Project logging package.

Contains the structured event logger, its JSON template catalog and the
colorlog-based configurator for applications.
"""

from .event_catalog import (  # noqa: F401
    EVENT_TEMPLATES,
    reload_event_templates,
    template_fields,
    unknown_events,
)
from .logger import SnooLogger, logger, redact  # noqa: F401
from .logging_config import LoggerConfigurator  # noqa: F401

__all__ = [
    "SnooLogger",
    "logger",
    "redact",
    "EVENT_TEMPLATES",
    "reload_event_templates",
    "template_fields",
    "unknown_events",
    "LoggerConfigurator",
]
