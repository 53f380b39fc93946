from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.api.deps import CurrentUser, get_report_generator
from veille_ia.db.session import get_db
from veille_ia.schemas.generation import GenerateRequest, GenerateResponse
from veille_ia.schemas.validation import parse_body
from veille_ia.schemas.veille import VeilleOut
from veille_ia.services.report_generator import ReportGenerator

"""
API Génération IA.

Rôle (fonctionnel) :
- Génère un rapport de veille via OpenAI pour une veille de l’utilisateur connecté.
- Enregistre le résultat sur la veille et l’ajoute à l’historique (une transaction).
- Aucun retry : les erreurs fournisseur sont traduites en codes explicites (voir ReportGenerator).
"""

router = APIRouter(tags=["generation"])


@router.post("/generate-veille", response_model=GenerateResponse)
async def generate_veille(
    payload: Any = Body(...),
    user_id: str = CurrentUser,
    db: AsyncSession = Depends(get_db),
    generator: ReportGenerator = Depends(get_report_generator),
):
    data = parse_body(GenerateRequest, payload)
    result = await generator.generate(db, user_id, data)
    return GenerateResponse(success=True, veille=VeilleOut.model_validate(result.veille), content=result.content)
