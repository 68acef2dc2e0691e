"""Structured logging setup for the panel estimator."""
import json
import logging
import sys
from datetime import datetime, timezone

# Record attributes copied into the JSON payload when a caller passes them via ``extra``
EXTRA_FIELDS = (
    "estimate_id",
    "component_code",
    "duration_ms",
    "request_id",
    "http_method",
    "http_path",
    "http_status",
)

NOISY_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "sqlalchemy.engine")


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    root.handlers = [handler]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
