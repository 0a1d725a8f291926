# logging_config.py
import logging
import os
import json
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Iterable, Optional
from datetime import datetime, timezone

from .config import settings

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

REDACTED = "****REDACTED****"


class SensitiveDataFilter(logging.Filter):
    """Filter to redact sensitive ``extra`` fields from log records."""

    def __init__(self, sensitive_patterns: Optional[Iterable[str]] = None):
        super().__init__()
        self.sensitive_patterns = tuple(
            sensitive_patterns or ("password", "token", "api_key", "secret")
        )

    def _is_sensitive(self, key: str) -> bool:
        lowered = key.lower()
        return any(pattern in lowered for pattern in self.sensitive_patterns)

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: REDACTED if self._is_sensitive(str(k)) else self._scrub(v)
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [self._scrub(v) for v in value]
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in list(record.__dict__.items()):
            if key in _RESERVED_ATTRS:
                continue
            if self._is_sensitive(key):
                setattr(record, key, REDACTED)
            else:
                setattr(record, key, self._scrub(value))
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        # Fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(name: str, level: Optional[str] = None) -> logging.Logger:
    """Set up logging configuration.

    Console output is always JSON on stdout. When ``LOG_DIR`` (or ``CONSOLE_LOG_DIR``) is
    set a rotating file ``<LOG_DIR>/<name>.log`` is written as well.
    """
    log_level = (level or os.getenv("LOG_LEVEL") or settings.log_level).upper()
    log_dir = os.getenv("LOG_DIR") or settings.log_dir

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers
    logger.handlers = []
    logger.filters = []
    logger.addFilter(SensitiveDataFilter())

    formatter = JSONFormatter()

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=10485760,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_level == "DEBUG":
        logger.debug("Debug logging enabled")

    return logger
