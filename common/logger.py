import json
import logging
import os
import time
import traceback

logger = logging.getLogger("visitors")
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)


def log_info(event: str, **kwargs):
    """Emit a structured JSON log entry. Never include visitor email addresses."""
    entry = {"level": "INFO", "event": event, **kwargs}
    logger.info(json.dumps(entry, default=str))


def log_error(event: str, error_code: str = None, exc: BaseException = None, **kwargs):
    """Emit a structured JSON error log entry, with the traceback when `exc` is given."""
    entry = {"level": "ERROR", "event": event, "error_code": error_code, **kwargs}
    if exc is not None:
        entry["exception"] = f"{type(exc).__name__}: {exc}"
        entry["traceback"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    logger.error(json.dumps(entry, default=str))


class Timer:
    """Context manager for measuring execution time in milliseconds."""

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.duration_ms = round((time.perf_counter() - self.start) * 1000, 2)
