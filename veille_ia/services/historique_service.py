from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.db.base import utcnow
from veille_ia.models.historique import HistoriqueEntry
from veille_ia.schemas.historique import HistoriqueCreate
from veille_ia.services.veille_service import get_owned_veille

"""
Historique Service.

Rôle (fonctionnel) :
- Journal en ajout seul des rapports d’une veille.
- list_historique : entrées de l’appelant (option : une seule veille), date desc, paginées.
- add_entry : ajout manuel, après vérification que la veille parente existe et appartient à l’appelant.

Les entrées créées par la génération IA passent par report_generator (même transaction
que la mise à jour de la veille).
"""

log = logging.getLogger("veille_ia.historique")


async def list_historique(
    db: AsyncSession,
    user_id: str,
    *,
    limit: int,
    offset: int,
    veille_id: Optional[int] = None,
) -> List[HistoriqueEntry]:
    stmt = select(HistoriqueEntry).where(HistoriqueEntry.user_id == user_id)
    if veille_id is not None:
        stmt = stmt.where(HistoriqueEntry.veille_id == veille_id)

    stmt = (
        stmt.order_by(desc(HistoriqueEntry.created_at), desc(HistoriqueEntry.id))
        .offset(offset)
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


async def add_entry(db: AsyncSession, user_id: str, data: HistoriqueCreate) -> HistoriqueEntry:
    await get_owned_veille(db, user_id, data.veille_id, not_found_code="VEILLE_NOT_FOUND")

    entry = HistoriqueEntry(
        veille_id=data.veille_id,
        user_id=user_id,
        contenu=data.contenu,
        created_at=utcnow(),
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    log.info(
        "historique_added",
        extra={"user_id": user_id, "veille_id": data.veille_id, "historique_id": entry.id},
    )
    return entry
