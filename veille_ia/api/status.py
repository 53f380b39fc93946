from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.core.settings import settings
from veille_ia.db.base import as_utc
from veille_ia.db.session import get_db
from veille_ia.models.historique import HistoriqueEntry

"""
API System Status.

Rôle (fonctionnel) :
- Statut de la plateforme pour le monitoring / l’UI.
- Vérifie la disponibilité de la base (requête simple).
- Indique si la génération IA est configurée (clé présente + modèle).
- Fraîcheur : date de la dernière entrée d’historique (dernière génération).
"""

router = APIRouter(prefix="/system", tags=["system"])
log = logging.getLogger("veille_ia.status")


@router.get("/status")
async def system_status(db: AsyncSession = Depends(get_db)):
    db_ok = True
    last_generation = None
    try:
        await db.execute(text("SELECT 1"))
        last = (await db.execute(select(func.max(HistoriqueEntry.created_at)))).scalar_one_or_none()
        last_generation = as_utc(last).isoformat() if last else None
    except SQLAlchemyError:
        log.exception("status_db_check_failed")
        db_ok = False

    ai_ok = bool(settings.OPENAI_API_KEY.strip())

    return {
        "ok": db_ok and ai_ok,
        "db": {"ok": db_ok},
        "ai": {"ok": ai_ok, "model": settings.OPENAI_MODEL},
        "last_generation": last_generation,
        "ts": datetime.now(timezone.utc).isoformat(),
    }
