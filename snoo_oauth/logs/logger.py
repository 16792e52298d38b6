"""Structured event logger.

Every message is identified by a ``(domain, action)`` pair whose human text
comes from the JSON catalog. Handlers are left to the application (see
``LoggerConfigurator``); this module only builds messages.
"""

from __future__ import annotations

import logging
import os

# Context keys whose values are credentials and must never reach a log line
SENSITIVE_KEYS = frozenset(
    {"access_token", "refresh_token", "token", "password", "client_secret", "code"}
)
_MASK = "***"
_EVENT_WIDTH = 32
_CLIENT_WIDTH = 16


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


def redact(context: dict[str, object]) -> dict[str, object]:
    """Return ``context`` with credential values masked."""
    return {k: (_MASK if k in SENSITIVE_KEYS and v else v) for k, v in context.items()}


class SnooLogger:
    """Thin wrapper over a stdlib logger emitting catalog-driven events.

    Concise mode renders ``[client] human text``. With ``DEBUG`` set the
    event name and the (redacted) context key/values are appended so log
    lines can be grepped by event.
    """

    def __init__(self, name: str = "snoo_oauth") -> None:
        self.logger = logging.getLogger(name)
        # Library logger: silent unless the application configures logging
        self.logger.addHandler(logging.NullHandler())

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def render(self, domain: str, action: str, context: dict[str, object]) -> tuple[str, bool]:
        """Render the catalog text for an event.

        Returns:
            ``(text, derived)`` where ``derived`` is True when the event has
            no catalog entry and the text was built from its name.
        """
        # Imported lazily so the catalog can be reloaded independently
        from .event_catalog import EVENT_TEMPLATES

        template = EVENT_TEMPLATES.get((domain, action))
        if template is None:
            return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}", True
        try:
            return template.format(**redact(context)), False
        except (KeyError, IndexError, ValueError):
            # Missing placeholder: show the raw template rather than drop the line
            return template, False

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        client = kwargs.pop("client", None)
        if human is None:
            human, derived = self.render(domain, action, kwargs)
            if derived:
                kwargs.setdefault("derived", True)
        prefix = self._prefix(client if isinstance(client, str) else None)
        if debug_enabled():
            msg = self._debug_message(f"{domain}_{action}".lower(), prefix, human, kwargs)
        else:
            msg = f"{prefix} {human}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _prefix(client: str | None) -> str:
        # Fixed width so lines from several engines line up
        return f"[{(client or 'system').ljust(_CLIENT_WIDTH)[:_CLIENT_WIDTH]}]"

    @staticmethod
    def _debug_message(
        event_name: str, prefix: str, human: str, context: dict[str, object]
    ) -> str:
        if len(event_name) > _EVENT_WIDTH:
            event_name = event_name[: _EVENT_WIDTH - 1] + "…"
        line = f"{event_name.ljust(_EVENT_WIDTH)} {prefix} {human}"
        if context:
            pairs = ", ".join(f"{k}={v}" for k, v in redact(context).items())
            line = f"{line} ({pairs})"
        return line


logger = SnooLogger()
