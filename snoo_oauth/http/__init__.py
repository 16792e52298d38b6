"""HTTP transport."""

from .request import HttpResponse, Request  # noqa: F401

__all__ = ["HttpResponse", "Request"]
