from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from veille_ia.schemas.validation import RequestSchema, required_id
from veille_ia.schemas.veille import VeilleOut

"""
Schemas Génération IA (Pydantic).

Rôle (fonctionnel) :
- Demande de génération d’un rapport pour une veille existante (veilleId, sujet, contexte optionnel).
- Réponse : veille mise à jour + texte brut généré.
"""


class GenerateRequest(RequestSchema):
    veille_id: int = Field(alias="veilleId")
    sujet: str = Field(min_length=1)
    contexte: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")

    error_codes = {
        "veilleId": {
            "missing": ("MISSING_VEILLE_ID", "veilleId is required"),
            "invalid": ("INVALID_VEILLE_ID", "veilleId must be a valid integer"),
        },
        "sujet": {"missing": ("MISSING_SUJET", "sujet is required")},
        "contexte": {"missing": ("INVALID_CONTEXTE", "contexte must be a string or null")},
    }

    @field_validator("veille_id", mode="before")
    @classmethod
    def _veille_id_present(cls, v):
        return required_id(v, "veilleId")

    @field_validator("contexte")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class GenerateResponse(BaseModel):
    success: bool = True
    veille: VeilleOut
    content: str
