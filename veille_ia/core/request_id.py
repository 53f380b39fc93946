from __future__ import annotations

import uuid
from contextvars import ContextVar

"""
Core Request ID.

Rôle (fonctionnel) :
- Conserve l’identifiant de requête (X-Request-Id) dans un ContextVar propre à chaque requête async.
- Sert au JSON logging (injection automatique) et aux payloads d’erreur (champ request_id).
"""

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(rid: str | None) -> None:
    _request_id.set(rid)


def get_request_id() -> str | None:
    return _request_id.get()


def ensure_request_id(incoming: str | None = None) -> str:
    """Réutilise le header entrant (nettoyé) ou génère un UUID, puis le fixe pour le contexte courant."""
    rid = (incoming or "").strip() or str(uuid.uuid4())
    set_request_id(rid)
    return rid
