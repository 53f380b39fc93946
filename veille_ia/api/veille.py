from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.api.deps import CurrentUser, CurrentUserById, Page, VeillePage, parse_path_id
from veille_ia.db.session import get_db
from veille_ia.schemas.validation import parse_body, reject_ownership_fields
from veille_ia.schemas.veille import (
    SectionOut,
    VeilleCreate,
    VeilleDeleteResponse,
    VeilleOut,
    VeilleSectionsResponse,
    VeilleUpdate,
)
from veille_ia.services import veille_service
from veille_ia.services.report_parser import parse_sections

"""
API Veille.

Rôle (fonctionnel) :
- Création d’une veille pour l’utilisateur connecté.
- Liste paginée (recherche titre/sujet, tri date desc).
- Lecture / mise à jour partielle / suppression d’une veille, avec contrôle de propriété.
- Découpage du dernier rapport en sections (affichage).

Notes :
- Les corps sont reçus bruts (dict) puis validés par schéma explicite : cela permet de renvoyer
  les codes métier attendus par le front (MISSING_TITRE, USER_ID_NOT_ALLOWED, …) au lieu d’un 422.
- L’identifiant de chemin est parsé à la main pour répondre INVALID_ID (400).
"""

router = APIRouter(prefix="/veille", tags=["veille"])


@router.post("", response_model=VeilleOut, status_code=201)
async def create_veille(
    payload: Any = Body(...),
    user_id: str = CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    data = parse_body(VeilleCreate, payload)
    veille = await veille_service.create_veille(db, user_id, data)
    return VeilleOut.model_validate(veille)


@router.get("", response_model=List[VeilleOut])
async def list_veilles(
    search: Optional[str] = Query(None),
    page: Page = VeillePage,
    user_id: str = CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    rows = await veille_service.list_veilles(db, user_id, limit=page.limit, offset=page.offset, search=search)
    return [VeilleOut.model_validate(v) for v in rows]


@router.get("/{veille_id}", response_model=VeilleOut)
async def get_veille(
    veille_id: str,
    user_id: str = CurrentUserById,
    db: AsyncSession = Depends(get_db),
):
    veille = await veille_service.get_owned_veille(db, user_id, parse_path_id(veille_id))
    return VeilleOut.model_validate(veille)


@router.put("/{veille_id}", response_model=VeilleOut)
async def update_veille(
    veille_id: str,
    payload: Any = Body(...),
    user_id: str = CurrentUserById,
    db: AsyncSession = Depends(get_db),
):
    vid = parse_path_id(veille_id)

    # userId interdit, puis existence / propriété, puis validation des champs
    reject_ownership_fields(payload).unwrap()
    veille = await veille_service.get_owned_veille(db, user_id, vid)
    data = parse_body(VeilleUpdate, payload)

    veille = await veille_service.update_veille(db, veille, data)
    return VeilleOut.model_validate(veille)


@router.delete("/{veille_id}", response_model=VeilleDeleteResponse)
async def delete_veille(
    veille_id: str,
    user_id: str = CurrentUserById,
    db: AsyncSession = Depends(get_db),
):
    veille = await veille_service.delete_veille(db, user_id, parse_path_id(veille_id))
    return VeilleDeleteResponse(message="Veille deleted successfully", deleted=VeilleOut.model_validate(veille))


@router.get("/{veille_id}/sections", response_model=VeilleSectionsResponse)
async def get_veille_sections(
    veille_id: str,
    user_id: str = CurrentUserById,
    db: AsyncSession = Depends(get_db),
):
    veille = await veille_service.get_owned_veille(db, user_id, parse_path_id(veille_id))
    sections = [SectionOut.model_validate(s) for s in parse_sections(veille.resultat)]
    return VeilleSectionsResponse(veille_id=veille.id, sections=sections)
