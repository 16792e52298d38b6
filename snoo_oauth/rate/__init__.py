"""Rate limiting toolkit."""

from .throttle import Throttle  # noqa: F401

__all__ = ["Throttle"]
