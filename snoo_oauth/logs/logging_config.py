"""
Console logging setup for applications embedding snoo-oauth.

The library never touches the root logger on import; an application calls
``LoggerConfigurator().configure()`` once at start-up.
"""

import logging
import sys
from typing import TextIO

import colorlog

from .logger import debug_enabled

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s"
LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}
# Third-party loggers kept at INFO even when DEBUG is on
NOISY_LOGGERS = ("aiohttp", "asyncio")


class LoggerConfigurator:
    """Install one colorlog handler on the root logger."""

    def __init__(self, level: int | None = None, stream: TextIO | None = None):
        """
        Args:
            level: Explicit level; defaults to DEBUG when the ``DEBUG`` env
                var is truthy, else INFO.
            stream: Output stream (stderr by default).
        """
        self.level = level
        self.stream = stream
        self.handler: logging.Handler | None = None

    def resolve_level(self) -> int:
        if self.level is not None:
            return self.level
        return logging.DEBUG if debug_enabled() else logging.INFO

    @staticmethod
    def build_formatter() -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors=LEVEL_COLORS,
            secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
            reset=True,
        )

    def configure(self) -> logging.Handler:
        """Attach the colored handler and set levels; idempotent per instance."""
        level = self.resolve_level()
        root = logging.getLogger()
        if self.handler is None:
            self.handler = logging.StreamHandler(self.stream or sys.stderr)
            self.handler.setFormatter(self.build_formatter())
            root.addHandler(self.handler)
        root.setLevel(level)
        logging.getLogger("snoo_oauth").setLevel(level)
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.INFO))
        return self.handler

    def remove(self) -> None:
        if self.handler is not None:
            logging.getLogger().removeHandler(self.handler)
            self.handler = None
