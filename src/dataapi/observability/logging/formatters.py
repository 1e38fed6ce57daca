"""Log renderers for structlog."""

import json
from datetime import UTC, datetime
from typing import Any

from colorama import Fore, Back, Style, init

init(autoreset=True)

# Keys rendered in a fixed position ahead of the free-form fields
_LEADING_KEYS = ("timestamp", "level", "logger", "component", "event")


class JSONFormatter:
    """JSON formatter for structured logs."""

    def __init__(self, ensure_ascii: bool = False, indent: int | None = None):
        self.ensure_ascii = ensure_ascii
        self.indent = indent

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> str:
        """Format log event as JSON."""
        if "timestamp" not in event_dict:
            event_dict["timestamp"] = datetime.now(UTC).isoformat()

        event_dict["level"] = method_name.upper()

        if "logger" not in event_dict and hasattr(logger, "name"):
            event_dict["logger"] = logger.name

        return json.dumps(
            event_dict, ensure_ascii=self.ensure_ascii, indent=self.indent, default=str
        )


class ConsoleFormatter:
    """Console formatter with colors and human-readable output."""

    def __init__(self, colors: bool = True, show_timestamp: bool = True):
        self.colors = colors
        self.show_timestamp = show_timestamp

        self.level_colors = {
            "debug": Fore.CYAN,
            "info": Fore.GREEN,
            "warning": Fore.YELLOW,
            "error": Fore.RED,
            "critical": Fore.RED + Back.WHITE + Style.BRIGHT,
        }

    def _paint(self, color: str, text: str) -> str:
        return f"{color}{text}{Style.RESET_ALL}" if self.colors else text

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> str:
        """Format log event for console output."""
        parts = []

        if self.show_timestamp and "timestamp" in event_dict:
            timestamp = event_dict["timestamp"]
            if isinstance(timestamp, datetime):
                timestamp = timestamp.isoformat()
            parts.append(f"[{timestamp}]")

        level = method_name.upper()
        parts.append(self._paint(self.level_colors.get(level.lower(), ""), level))

        if "logger" in event_dict:
            parts.append(self._paint(Fore.BLUE, f"[{event_dict['logger']}]"))

        if "component" in event_dict:
            parts.append(self._paint(Fore.MAGENTA, f"[{event_dict['component']}]"))

        message = event_dict.get("event", "")
        if message:
            parts.append(str(message))

        fields = _render_fields(event_dict, "=")
        if fields:
            parts.append(self._paint(Fore.WHITE, ", ".join(fields)))

        return " ".join(parts)


class StructuredFormatter:
    """Structured formatter with key-value pairs."""

    def __init__(self, separator: str = " | ", key_value_separator: str = "="):
        self.separator = separator
        self.key_value_separator = key_value_separator

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> str:
        """Format log event as structured key-value pairs."""
        kv = self.key_value_separator
        parts = []

        if "timestamp" in event_dict:
            timestamp = event_dict["timestamp"]
            if isinstance(timestamp, datetime):
                timestamp = timestamp.isoformat()
            parts.append(f"timestamp{kv}{timestamp}")

        parts.append(f"level{kv}{method_name.upper()}")

        for key in ("logger", "component"):
            if key in event_dict:
                parts.append(f"{key}{kv}{event_dict[key]}")

        if "event" in event_dict:
            parts.append(f"message{kv}{event_dict['event']}")

        parts.extend(_render_fields(event_dict, kv))
        return self.separator.join(parts)


def _render_fields(event_dict: dict[str, Any], kv: str) -> list[str]:
    fields = []
    for key, value in event_dict.items():
        if key in _LEADING_KEYS:
            continue
        if isinstance(value, dict | list):
            value = json.dumps(value, default=str)
        fields.append(f"{key}{kv}{value}")
    return fields
