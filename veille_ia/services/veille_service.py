from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.core.errors import AppHTTPException
from veille_ia.db.base import utcnow
from veille_ia.models.veille import Veille
from veille_ia.schemas.veille import VeilleCreate, VeilleUpdate

"""
Veille Service.

Rôle (fonctionnel) :
- CRUD d’une veille, toujours scopé à l’utilisateur de la session :
  - create : propriétaire = appelant, created_at = updated_at = now
  - get_owned : 404 si absente, 403 si elle appartient à un autre utilisateur
  - list_for_user : filtre propriétaire + recherche titre/sujet + tri date desc + pagination
  - update : mise à jour partielle, updated_at toujours rafraîchi
  - delete : suppression physique (l’historique associé n’est pas touché)

Notes :
- Le contrôle de propriété est fait ici, à chaque opération (pas de contrainte DB).
- Le code appelant (API / générateur) ne manipule jamais user_id côté client.
"""

log = logging.getLogger("veille_ia.veille")

LIKE_ESCAPE = "\\"


def _like_term(search: str) -> str:
    """Sous-chaîne littérale pour LIKE/ILIKE (échappe %, _ et l’échappement lui-même)."""
    escaped = (
        search.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


async def create_veille(db: AsyncSession, user_id: str, data: VeilleCreate) -> Veille:
    now = utcnow()
    veille = Veille(
        user_id=user_id,
        titre=data.titre,
        sujet=data.sujet,
        contexte=data.contexte,
        resultat=data.resultat,
        created_at=now,
        updated_at=now,
    )
    db.add(veille)
    await db.commit()
    await db.refresh(veille)

    log.info("veille_created", extra={"user_id": user_id, "veille_id": veille.id})
    return veille


async def get_owned_veille(
    db: AsyncSession,
    user_id: str,
    veille_id: int,
    *,
    not_found_code: str = "NOT_FOUND",
) -> Veille:
    """Charge une veille et vérifie la propriété (404 puis 403)."""
    veille = (await db.execute(select(Veille).where(Veille.id == veille_id).limit(1))).scalars().first()
    if veille is None:
        raise AppHTTPException(404, not_found_code, "Veille not found")

    if veille.user_id != user_id:
        log.warning("veille_forbidden", extra={"user_id": user_id, "veille_id": veille_id})
        raise AppHTTPException(403, "FORBIDDEN", "Access denied")

    return veille


async def list_veilles(
    db: AsyncSession,
    user_id: str,
    *,
    limit: int,
    offset: int,
    search: Optional[str] = None,
) -> List[Veille]:
    stmt = select(Veille).where(Veille.user_id == user_id)

    term = (search or "").strip()
    if term:
        pattern = _like_term(term)
        stmt = stmt.where(
            or_(
                Veille.titre.ilike(pattern, escape=LIKE_ESCAPE),
                Veille.sujet.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    stmt = stmt.order_by(desc(Veille.created_at), desc(Veille.id)).offset(offset).limit(limit)
    return list((await db.execute(stmt)).scalars().all())


async def update_veille(db: AsyncSession, veille: Veille, data: VeilleUpdate) -> Veille:
    """Applique une mise à jour partielle sur une veille déjà chargée via get_owned_veille."""
    for field, value in data.changes().items():
        setattr(veille, field, value)
    veille.updated_at = utcnow()

    await db.commit()
    await db.refresh(veille)

    log.info("veille_updated", extra={"user_id": veille.user_id, "veille_id": veille.id})
    return veille


async def delete_veille(db: AsyncSession, user_id: str, veille_id: int) -> Veille:
    """Supprime la veille et retourne l’objet supprimé (snapshot déjà chargé)."""
    veille = await get_owned_veille(db, user_id, veille_id)

    await db.delete(veille)
    await db.commit()

    log.info("veille_deleted", extra={"user_id": user_id, "veille_id": veille_id})
    return veille
