"""Per-instance configuration models."""

from .model import AuthMode, Credentials, Duration, ServerConfig  # noqa: F401

__all__ = ["AuthMode", "Credentials", "Duration", "ServerConfig"]
