"""
Logging configuration for the chat gateway.

Console output goes through colorlog; errors reported via
``log_structured_error`` are also counted per category so a summary can be
emitted when the process exits.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import defaultdict
from typing import Any

import colorlog

MAX_ERRORS_PER_TYPE = 500


class ErrorAggregator:
    """Counts error occurrences per category for a shutdown summary."""

    def __init__(self):
        self.errors: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.lock = threading.Lock()
        self.start_time = time.time()

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        with self.lock:
            self.errors[error_type].append(
                {"timestamp": time.time(), "message": message, "context": context or {}}
            )
            if len(self.errors[error_type]) > MAX_ERRORS_PER_TYPE:
                self.errors[error_type] = self.errors[error_type][-MAX_ERRORS_PER_TYPE:]

    def get_error_summary(self) -> dict[str, Any]:
        with self.lock:
            summary = {}
            now = time.time()
            runtime_hours = (now - self.start_time) / 3600
            for error_type, occurrences in self.errors.items():
                recent = [e for e in occurrences if now - e["timestamp"] < 3600]
                summary[error_type] = {
                    "total_count": len(occurrences),
                    "recent_count": len(recent),
                    "rate_per_hour": len(occurrences) / max(runtime_hours, 1),
                    "last_occurrence": occurrences[-1] if occurrences else None,
                }
            return summary

    def reset(self) -> None:
        with self.lock:
            self.errors.clear()
            self.start_time = time.time()

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            logging.info("No errors recorded in current session")
            return

        logging.warning("🚨 ERROR SUMMARY REPORT")
        for error_type, stats in summary.items():
            logging.warning(
                f"  {error_type}: {stats['total_count']} total, "
                f"{stats['recent_count']} in last hour, "
                f"{stats['rate_per_hour']:.1f}/hour"
            )
            if stats["last_occurrence"]:
                logging.warning(f"    Last: {stats['last_occurrence']['message']}")


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context and record it in the aggregator.

    Args:
        error_type: Category of the error (e.g. 'network', 'auth', 'transport').
        message: Descriptive error message.
        exception: The exception that occurred (optional).
        context: Additional context data for debugging.
        level: Logging level (default: ERROR).
    """
    structured_message = f"[{error_type.upper()}] {message}"
    if exception:
        structured_message += f" | Exception: {type(exception).__name__}: {exception}"
    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.log(level, structured_message)
    error_aggregator.record_error(error_type, message, context)


class LoggerConfigurator:
    """Configures root logging with colorlog.

    Uses the DEBUG environment variable ('true', '1' or 'yes') to select the
    DEBUG level, otherwise INFO.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr

    def configure(self) -> None:
        debug_env = os.environ.get("DEBUG", "").lower()
        log_level = logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

        formatter = colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(formatter)

        logging.basicConfig(level=log_level, handlers=[handler], force=True)
        logging.getLogger().setLevel(log_level)

        # Frame-level chatter from the transport is not useful at DEBUG
        logging.getLogger("websockets").setLevel(logging.INFO)

        atexit.register(self._log_final_error_summary)

    def _log_final_error_summary(self) -> None:
        logging.info("📊 Final error summary before shutdown:")
        error_aggregator.log_summary_report()
