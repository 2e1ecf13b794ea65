"""Structured event logging for taskcat.

Events go to the ``taskcat`` logger as compact JSON objects. When the profile
configures a logs directory, each run writes one file in which every event is
rendered as a block::

    === store_save ===
    ts: 2026-02-10T09:12:44+09:00
    level: INFO
    data_file: /home/me/.taskcat/tasks.bin
    bytes: 41
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from taskcat.constants import APP_NAME, DATETIME_FORMAT_FILENAME, LOG_FILE_EXTENSION

logger = logging.getLogger(APP_NAME)

# Fields listed here are written first, in this order; others follow sorted.
EVENT_FIELDS: dict[str, tuple[str, ...]] = {
    "app_start": ("ts", "level", "mode", "profile_file", "data_file", "log_file"),
    "app_stop": ("ts", "level", "reason", "dirty", "error_type", "error"),
    "store_load": ("ts", "level", "data_file", "exists", "bytes", "categories", "tasks"),
    "store_save": ("ts", "level", "data_file", "bytes", "categories", "tasks"),
    "command_exec": ("ts", "level", "command", "args_summary", "dirty", "elapsed_ms"),
    "command_error": ("ts", "level", "command", "args_summary", "error_type", "error"),
}
_LEADING_FIELDS = ("ts", "level")


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(item) for item in value]
    return str(value)


def summarize_text(text: Any) -> str:
    """Collapse whitespace so a value fits on one log line."""
    if text is None:
        return ""
    return " ".join(str(text).split())


def summarize_command_args(args: list[Any]) -> str:
    return summarize_text(" ".join(map(str, args)))


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log one event as a JSON object."""
    payload: dict[str, Any] = {
        "event": event,
        "ts": datetime.now().astimezone().isoformat(),
    }
    payload.update((key, _jsonable(value)) for key, value in fields.items())
    logger.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


class EventBlockFormatter(logging.Formatter):
    """Render log records as '=== event ===' blocks separated by blank lines."""

    def __init__(self) -> None:
        super().__init__()
        self._started = False

    @staticmethod
    def _one_line(value: Any) -> str:
        return str(value).replace("\n", "\\n")

    @staticmethod
    def _parse(record: logging.LogRecord) -> tuple[str, dict[str, Any]]:
        message = record.getMessage()
        try:
            payload = json.loads(message)
        except ValueError:
            payload = None

        if isinstance(payload, dict) and "event" in payload:
            fields = dict(payload)
            return str(fields.pop("event")), fields

        ts = datetime.fromtimestamp(record.created).astimezone().isoformat()
        return record.name, {"ts": ts, "message": message}

    def format(self, record: logging.LogRecord) -> str:
        event, fields = self._parse(record)
        fields["level"] = record.levelname

        order = EVENT_FIELDS.get(event, _LEADING_FIELDS)
        keys = [key for key in order if key in fields]
        keys += sorted(key for key in fields if key not in order)

        lines = [f"=== {event} ==="]
        for key in keys:
            if fields[key] is not None:
                lines.append(f"{key}: {self._one_line(fields[key])}")
        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        block = "\n".join(lines)
        if self._started:
            # Separate from the previous block without a trailing blank line.
            return "\n" + block
        self._started = True
        return block


def build_run_log_path(logs_dir: str) -> str:
    """Return a fresh log file path for this run; existing files are never reused."""
    directory = Path(logs_dir)
    directory.mkdir(parents=True, exist_ok=True)

    stem = f"{APP_NAME}_{datetime.now().strftime(DATETIME_FORMAT_FILENAME)}"
    path = directory / f"{stem}{LOG_FILE_EXTENSION}"
    counter = 1
    while path.exists():
        path = directory / f"{stem}_{counter}{LOG_FILE_EXTENSION}"
        counter += 1
    return str(path)


def setup_logging(log_file: Optional[str] = None) -> None:
    """Route events to log_file. Without a file, logging is switched off."""
    if not log_file:
        logging.disable(logging.CRITICAL)
        return

    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(EventBlockFormatter())
    logging.disable(logging.NOTSET)
    logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
