"""Rich console handler for request-governor and HTTP events.

Where: platform/logging/handlers.py
What: Render structured ``governor.*`` and ``http.*`` log records as compact coloured lines.
Why: Make queueing behaviour readable at a glance while a client is throttled.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class GovernorRichHandler(RichHandler):
    """Custom Rich handler that styles governor and HTTP events."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "governor.admit": ("✅", "green"),
        "governor.buffer": ("⏳", "yellow"),
        "governor.release": ("🚦", "cyan"),
        "governor.reject": ("⛔", "red"),
        "governor.clear": ("🧹", "magenta"),
        "governor.reconfigure": ("⚙️", "blue"),
        "http.response": ("🌐", "blue"),
        "http.error": ("❌", "red"),
    }
    _URL_LIMIT: ClassVar[int] = 80

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize the handler with custom settings.

        Args:
            *args: Positional arguments to pass to RichHandler.
            **kwargs: Keyword arguments to pass to RichHandler.
        """
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    @classmethod
    def _shorten_url(cls, url: str) -> str:
        if len(url) <= cls._URL_LIMIT:
            return url
        return "…" + url[-(cls._URL_LIMIT - 1):]

    def _render_governor_event(self, record: logging.LogRecord, event: str) -> Text:
        body = Text()
        governor = getattr(record, "governor", None)
        if isinstance(governor, str) and governor:
            _ = body.append(f"[{governor}] ", style=Style(dim=True))

        label = {
            "governor.admit": "Admitted",
            "governor.buffer": "Buffered",
            "governor.release": "Released",
            "governor.reject": "Rejected",
            "governor.clear": "Cleared buffer",
            "governor.reconfigure": "Reconfigured",
        }.get(event, event)
        _ = body.append(label)

        metrics: list[str] = []
        free_slots = getattr(record, "free_slots", None)
        if isinstance(free_slots, int):
            metrics.append(f"free={free_slots}")
        buffered = getattr(record, "buffered", None)
        if isinstance(buffered, int):
            metrics.append(f"buffered={buffered}")
        buffer_slots = getattr(record, "buffer_slots", None)
        if isinstance(buffer_slots, int):
            metrics.append(f"buffer_free={buffer_slots}")
        delay_ms = getattr(record, "delay_ms", None)
        if isinstance(delay_ms, (int, float)):
            metrics.append(f"delay={delay_ms:.0f} ms")
        dropped = getattr(record, "dropped", None)
        if isinstance(dropped, int):
            metrics.append(f"dropped={dropped}")
        max_calls = getattr(record, "max_calls", None)
        if isinstance(max_calls, int):
            metrics.append(f"max_calls={max_calls}")
        if metrics:
            _ = body.append(" [" + ", ".join(metrics) + "]")
        return body

    def _render_http_event(self, record: logging.LogRecord, event: str) -> Text:
        body = Text()
        method = getattr(record, "method", None)
        if isinstance(method, str):
            _ = body.append(f"{method} ", style=Style(bold=True))
        url = getattr(record, "url", None)
        if isinstance(url, str):
            _ = body.append(self._shorten_url(url), style=Style(color="white"))

        details: list[str] = []
        status = getattr(record, "status", None)
        if isinstance(status, int):
            details.append(f"status={status}")
        remaining = getattr(record, "ratelimit_remaining", None)
        if isinstance(remaining, int):
            details.append(f"remote_remaining={remaining}")
        if event == "http.error":
            error_message = getattr(record, "error_message", None)
            if error_message:
                details.append(str(error_message))
        if details:
            _ = body.append(" (" + ", ".join(details) + ")")
        return body

    def _render_event(self, record: logging.LogRecord) -> Text | None:
        """Render structured events with dedicated styling."""

        event = getattr(record, "governor_event", None) or getattr(record, "http_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        if event.startswith("governor."):
            body = self._render_governor_event(record, event)
        else:
            body = self._render_http_event(record, event)
        body.stylize(Style(color=color), 0, len(body))
        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for structured events."""

        event_text = self._render_event(record)
        if event_text is not None:
            return event_text
        return super().render_message(record, message)


__all__ = ["GovernorRichHandler"]
