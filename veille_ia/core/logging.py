from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .request_id import get_request_id

"""
Core Logging.

Rôle (fonctionnel) :
- Configure un logging JSON uniforme pour toute l’application (API + uvicorn).
- Injecte un request_id dans chaque log afin de corréler les événements d’une même requête.
- Supporte des “extras” structurés (method, path, status_code, duration_ms, user_id, veille_id, etc.).

Notes :
- Le root logger est configuré et uvicorn est aligné sur le même handler.
"""

# Extras reconnus (logger.info(..., extra={...}))
EXTRA_KEYS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "user_id",
    "veille_id",
    "historique_id",
    "code",
    "model",
)

# Bibliothèques bavardes (requêtes HTTP sortantes, moteur SQL)
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "sqlalchemy.engine")


class RequestIdFilter(logging.Filter):
    """Ajoute request_id au LogRecord (valeur '-' si absent)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """Formateur JSON pour logs structurés (1 event = 1 ligne JSON)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "msg": record.getMessage(),
        }

        for key in EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """
    Initialise le logging global (root) en JSON et aligne uvicorn sur la même configuration.

    - Un seul StreamHandler stdout (JsonFormatter + RequestIdFilter), recréé à chaque appel.
    - uvicorn partage ce handler ; httpx / openai / sqlalchemy sont bornés à WARNING
      (une ligne par appel HTTP sortant sinon).
    """
    lvl = level.upper()

    root = logging.getLogger()
    root.setLevel(lvl)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = root.handlers
        logger.propagate = False
        logger.setLevel(lvl)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.getLevelName(lvl), logging.WARNING))
