"""Event template catalog, loaded from the packaged ``event_templates.json``."""

from __future__ import annotations

import json
import string
from collections.abc import Iterable
from importlib import resources
from typing import Any

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def _flatten(raw: Any) -> dict[tuple[str, str], str]:
    if not isinstance(raw, dict):
        raise ValueError("event catalog root must be an object")
    return {
        (domain, action): text
        for domain, actions in raw.items()
        if isinstance(actions, dict)
        for action, text in actions.items()
        if isinstance(text, str)
    }


def _load() -> dict[tuple[str, str], str]:
    source = resources.files(__package__).joinpath("event_templates.json")
    try:
        return _flatten(json.loads(source.read_text(encoding="utf-8")))
    except FileNotFoundError:
        return {("app", "load_error"): "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}


def reload_event_templates() -> None:
    # Update in place so names imported elsewhere see the new templates
    fresh = _load()
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(fresh)


def template_fields(domain: str, action: str) -> set[str]:
    """Placeholder names used by an event's template (empty if unknown)."""
    template = EVENT_TEMPLATES.get((domain, action), "")
    return {name for _, name, _, _ in string.Formatter().parse(template) if name}


def unknown_events(keys: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Return the ``(domain, action)`` pairs that have no template."""
    return [key for key in keys if key not in EVENT_TEMPLATES]


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "reload_event_templates", "template_fields", "unknown_events"]
