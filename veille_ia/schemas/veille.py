from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from veille_ia.db.base import as_utc
from veille_ia.schemas.validation import RequestSchema

"""
Schemas Veille (Pydantic).

Rôle (fonctionnel) :
- Contrat HTTP autour des veilles :
  - création (titre + sujet obligatoires, contexte/resultat optionnels),
  - mise à jour partielle (seuls les champs présents sont appliqués),
  - représentation d’une veille (camelCase côté JSON),
  - réponse de suppression et découpage en sections du rapport.

Notes :
- Les chaînes sont “trimées” avant validation (str_strip_whitespace).
- ConfigDict(from_attributes=True) permet de construire la sortie depuis un objet ORM.
"""


class VeilleCreate(RequestSchema):
    """Payload de création d’une veille."""
    titre: str = Field(min_length=1)
    sujet: str = Field(min_length=1)
    contexte: Optional[str] = None
    resultat: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    error_codes = {
        "titre": {"missing": ("MISSING_TITRE", "Titre is required")},
        "sujet": {"missing": ("MISSING_SUJET", "Sujet is required")},
        "contexte": {"missing": ("INVALID_CONTEXTE", "Contexte must be a string or null")},
        "resultat": {"missing": ("INVALID_RESULTAT", "Resultat must be a string or null")},
    }

    @field_validator("contexte", "resultat")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class VeilleUpdate(RequestSchema):
    """
    Payload de mise à jour partielle.

    - titre / sujet : si présents, chaîne non vide (null refusé).
    - contexte / resultat : si présents, chaîne ou null (null efface la valeur).
    """
    titre: Optional[str] = Field(default=None, min_length=1)
    sujet: Optional[str] = Field(default=None, min_length=1)
    contexte: Optional[str] = None
    resultat: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    error_codes = {
        "titre": {"missing": ("INVALID_TITRE", "Titre must be a non-empty string")},
        "sujet": {"missing": ("INVALID_SUJET", "Sujet must be a non-empty string")},
        "contexte": {"missing": ("INVALID_CONTEXTE", "Contexte must be a string or null")},
        "resultat": {"missing": ("INVALID_RESULTAT", "Resultat must be a string or null")},
    }

    @field_validator("titre", "sujet")
    @classmethod
    def _not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("must be a non-empty string")
        return v

    def changes(self) -> Dict[str, Any]:
        """Champs explicitement fournis par le client (null compris)."""
        return self.model_dump(include=set(self.model_fields_set))


class VeilleOut(BaseModel):
    """Sortie API d’une veille."""
    id: int
    user_id: str
    titre: str
    sujet: str
    contexte: Optional[str] = None
    resultat: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_serializer("created_at", "updated_at")
    def _iso_utc(self, dt: datetime) -> str:
        return as_utc(dt).isoformat()


class VeilleDeleteResponse(BaseModel):
    message: str
    deleted: VeilleOut


class SectionOut(BaseModel):
    """Section d’un rapport (titre détecté, contenu, catégorie thématique, couleur d’affichage)."""
    title: str
    body: str
    category: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class VeilleSectionsResponse(BaseModel):
    veille_id: int
    sections: List[SectionOut]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
