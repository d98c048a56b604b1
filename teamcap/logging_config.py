"""Structured logging configuration."""
import logging
import json
import sys
from datetime import datetime, timezone
from typing import Optional

from teamcap.config import config


class JSONFormatter(logging.Formatter):
    """JSON structured log formatter for production."""
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "job_id"):
            log_entry["job_id"] = record.job_id
        return json.dumps(log_entry)


def setup_logging(level: Optional[str] = None, json_output: Optional[bool] = None):
    """Configure application logging."""
    level = level or config.log_level
    if json_output is None:
        json_output = config.is_prod
    
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
        ))

    root.handlers = [handler]
