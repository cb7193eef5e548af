"""Structured Logging - JSON lines for the shop's server logs, plain text for local runs.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Entity ids passed via `extra=` (order, account, worker...) become top-level keys
    - setup_logging is idempotent: calling it twice never doubles the output

Design Decisions:
    - Timestamps come from the LogRecord, not from format time
    - SQLAlchemy engine logging stays at WARNING unless LOG_LEVEL is DEBUG
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "order_id", "order_number", "customer_id", "account_id", "transaction_id",
    "worker_id", "product_id", "warehouse_id", "error_code", "path",
)


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = str(value)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)

    numeric = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if numeric <= logging.DEBUG else logging.WARNING,
    )
