"""Authenticated API call layer."""

from .authenticated import AuthenticatedCaller  # noqa: F401

__all__ = ["AuthenticatedCaller"]
