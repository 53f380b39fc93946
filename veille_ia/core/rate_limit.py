from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Tuple

from fastapi import Request

from veille_ia.core.errors import AppHTTPException
from veille_ia.core.settings import settings

"""
Core Rate Limit.

Rôle (fonctionnel) :
- Protège l’endpoint de génération IA (coûteux) contre les rafales de requêtes.
- Implémentation “in-memory” par appelant + route, fenêtre fixe de 60 secondes (RPM).
- L’appelant est identifié par son bearer token s’il est présent, sinon par son IP.

Activation via settings :
- RATE_LIMIT_ENABLED : active/désactive le rate limiting.
- RATE_LIMIT_RPM : limite de requêtes par minute (par appelant + route).

Ce limiteur ne réessaie rien : il répond 429 RATE_LIMITED, distinct de OPENAI_RATE_LIMIT
(qui vient du fournisseur IA).
"""

WINDOW_S = 60.0


@dataclass
class _Bucket:
    window_start: float
    count: int


class InMemoryRateLimiter:
    """Compteur par clé (appelant, "METHOD /path") réinitialisé à chaque fenêtre de 60s."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._buckets: Dict[Tuple[str, str], _Bucket] = {}

    def _caller(self, request: Request) -> str:
        auth = request.headers.get("authorization") or ""
        parts = auth.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return f"token:{parts[1]}"
        return f"ip:{request.client.host if request.client else 'unknown'}"

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    def check(self, request: Request) -> None:
        """Vérifie la limite pour (appelant + route). Lève 429 si dépassement."""
        if not settings.RATE_LIMIT_ENABLED:
            return

        limit = int(settings.RATE_LIMIT_RPM or 0)
        if limit <= 0:
            return

        key = (self._caller(request), f"{request.method} {request.url.path}")
        now = time.time()

        with self._lock:
            bucket = self._buckets.get(key)

            if bucket is None or (now - bucket.window_start) >= WINDOW_S:
                self._buckets[key] = _Bucket(window_start=now, count=1)
                return

            bucket.count += 1

            if bucket.count > limit:
                raise AppHTTPException(
                    429,
                    "RATE_LIMITED",
                    "Too many requests",
                    message=f"Trop de requêtes (limite: {limit}/min).",
                    details={"limit_rpm": limit},
                )


rate_limiter = InMemoryRateLimiter()
