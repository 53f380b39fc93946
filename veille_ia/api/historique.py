from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.api.deps import CurrentUser, HistoriquePage, Page, parse_int
from veille_ia.core.errors import AppHTTPException
from veille_ia.db.session import get_db
from veille_ia.schemas.historique import HistoriqueCreate, HistoriqueOut
from veille_ia.schemas.validation import parse_body
from veille_ia.services import historique_service

"""
API Historique.

Rôle (fonctionnel) :
- Lister l’historique des rapports de l’utilisateur connecté (option : filtrer par veille).
- Ajouter manuellement une entrée à l’historique d’une veille dont on est propriétaire.

Notes :
- Pas de modification ni de suppression : l’historique est en ajout seul.
"""

router = APIRouter(prefix="/historique", tags=["historique"])


@router.get("", response_model=List[HistoriqueOut])
async def list_historique(
    veille_id: Optional[str] = Query(None, alias="veilleId"),
    page: Page = HistoriquePage,
    user_id: str = CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    vid = None
    if veille_id:
        vid = parse_int(veille_id)
        if vid is None:
            raise AppHTTPException(400, "INVALID_VEILLE_ID", "Invalid veilleId parameter")

    rows = await historique_service.list_historique(
        db, user_id, limit=page.limit, offset=page.offset, veille_id=vid
    )
    return [HistoriqueOut.model_validate(h) for h in rows]


@router.post("", response_model=HistoriqueOut, status_code=201)
async def create_historique(
    payload: Any = Body(...),
    user_id: str = CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    data = parse_body(HistoriqueCreate, payload)
    entry = await historique_service.add_entry(db, user_id, data)
    return HistoriqueOut.model_validate(entry)
