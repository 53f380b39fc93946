from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.db.base import as_utc
from veille_ia.models.user_session import UserSession

"""
Core Security (sessions bearer).

Rôle (fonctionnel) :
- Résout un header `Authorization: Bearer <token>` en identifiant utilisateur.
- Les sessions sont émises ailleurs (front / fournisseur d’auth) : ici on les lit seulement.

Comportement :
- Header absent ou mal formé -> pas d’identité.
- Aucun token identique en base -> pas d’identité.
- Session dont expires_at n’est pas strictement dans le futur -> pas d’identité.
- Vérification refaite à chaque requête : ni cache, ni prolongation de session.
"""

log = logging.getLogger("veille_ia.security")


def extract_bearer_token(request: Request) -> Optional[str]:
    """Extrait le token d’un header Authorization: Bearer <token> (None si absent/mal formé)."""
    auth = request.headers.get("authorization")
    if not auth:
        return None

    parts = auth.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip() or None
    return None


def session_is_active(session: UserSession, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return as_utc(session.expires_at) > now


async def resolve_user_id(db: AsyncSession, token: Optional[str]) -> Optional[str]:
    """Retourne le user_id de la session associée au token, ou None."""
    if not token:
        return None

    session = (
        (await db.execute(select(UserSession).where(UserSession.token == token).limit(1)))
        .scalars()
        .first()
    )
    if session is None:
        return None

    if not session_is_active(session):
        log.info("session_expired", extra={"user_id": session.user_id})
        return None

    return session.user_id
