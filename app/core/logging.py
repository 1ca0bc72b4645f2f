import logging
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from contextvars import ContextVar

# Context variable to store request_id for the current task/request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Ranking context passed by services via `extra=`; grouped under "context"
CONTEXT_FIELDS = ("job_id", "resume_id", "rank", "action", "planned")

SERVICE_NAME = "resume-screener"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    One JSON object per line: timestamp, level, logger, message, the request
    id of the current request, and a "context" object holding whichever of
    job_id / resume_id / rank / action / planned the caller supplied.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)

        log_record["service"] = SERVICE_NAME

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id

        context = {}
        for field in CONTEXT_FIELDS:
            if field in log_record:
                context[field] = log_record.pop(field)
        if context:
            log_record["context"] = context

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_record["level"] = (log_record.get("level") or record.levelname).upper()


def setup_logging(level: int = logging.INFO):
    logger = logging.getLogger()
    # setup_logging may run more than once under test reloads
    if any(isinstance(h.formatter, CustomJsonFormatter) for h in logger.handlers):
        return
    log_handler = logging.StreamHandler()
    log_handler.setFormatter(CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    logger.addHandler(log_handler)
    logger.setLevel(level)

    # Suppress verbose logs from some libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("PyPDF2").setLevel(logging.ERROR)
