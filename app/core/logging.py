import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from app.core.config import settings

# Correlation id of the request being served; empty outside a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Libraries whose INFO chatter drowns the application log
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "passlib")


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per record, tagged with service, environment and request id."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        log_record["level"] = record.levelname
        log_record["service"] = settings.app_name
        log_record["environment"] = settings.environment

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id


def setup_logging(level: int = None):
    root = logging.getLogger()
    # Reloads (uvicorn --reload, test sessions) must not stack handlers
    if any(isinstance(h.formatter, ServiceJsonFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(ServiceJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    root.addHandler(handler)
    root.setLevel(level or logging.getLevelName(settings.log_level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
