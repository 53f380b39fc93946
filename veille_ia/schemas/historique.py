from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from veille_ia.db.base import as_utc
from veille_ia.schemas.validation import RequestSchema, required_id

"""
Schemas Historique (Pydantic).

Rôle (fonctionnel) :
- Ajout manuel d’une entrée d’historique (veilleId + contenu).
- Représentation d’une entrée (camelCase côté JSON).
"""


class HistoriqueCreate(RequestSchema):
    veille_id: int = Field(alias="veilleId")
    contenu: str = Field(min_length=1)

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")

    error_codes = {
        "veilleId": {
            "missing": ("MISSING_VEILLE_ID", "veilleId is required"),
            "invalid": ("INVALID_VEILLE_ID", "veilleId must be a valid integer"),
        },
        "contenu": {"missing": ("MISSING_CONTENU", "contenu is required and cannot be empty")},
    }

    @field_validator("veille_id", mode="before")
    @classmethod
    def _veille_id_present(cls, v):
        return required_id(v, "veilleId")


class HistoriqueOut(BaseModel):
    id: int
    veille_id: int
    user_id: str
    contenu: str
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_serializer("created_at")
    def _iso_utc(self, dt: datetime) -> str:
        return as_utc(dt).isoformat()
