"""
Configuración de logs: JSON para producción, texto plano para desarrollo.

Uso:
    from cashdrawer.logging_config import configure_logging
    configure_logging()  # una sola vez al arrancar
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from cashdrawer.config import settings

# Campos extra que se copian al JSON si vienen en el record (logger.info(..., extra={...}))
EXTRA_FIELDS = ("session_id", "actor_id", "store_id", "validator_id")


class JSONFormatter(logging.Formatter):
    """Una línea JSON por evento."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = None, json_output: bool = None) -> None:
    level = (level or settings.LOG_LEVEL).upper()
    json_output = settings.LOG_JSON if json_output is None else json_output

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # SQLAlchemy es muy ruidoso en INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
