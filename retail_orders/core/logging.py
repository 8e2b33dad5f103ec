"""Root logging for the retail order store.

Service modules log through ``logging.getLogger(__name__)`` and attach the
keys they touched (``extra={"order_id": ...}``). The JSON formatter lifts
those keys into the payload so one order can be traced across tables.
"""

import json
import logging
from datetime import datetime, timezone

from retail_orders.config import Settings, get_settings

# Record attributes copied into JSON output when a log call supplies them.
RECORD_KEYS = ("order_id", "product_id", "staff_id", "sequence")

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(app)s] %(name)s - %(message)s"


class AppContextFilter(logging.Filter):
    """Stamp every record with the application name and environment."""

    def __init__(self, app: str, environment: str):
        super().__init__()
        self.app = app
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.app = self.app
        record.environment = self.environment
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "app": getattr(record, "app", None),
            "environment": getattr(record, "environment", None),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in RECORD_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def build_handler(settings: Settings) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.addFilter(AppContextFilter(settings.APP_NAME, settings.ENVIRONMENT))
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=PLAIN_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def setup_logging(settings: Settings | None = None) -> logging.Handler:
    """Replace the root handlers with one stream handler and return it."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root.handlers.clear()
    handler = build_handler(settings)
    root.addHandler(handler)

    # Statement logging is opt-in whatever the root level is.
    sql_level = logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
    return handler
