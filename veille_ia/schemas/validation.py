from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Generic, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

from veille_ia.core.errors import AppHTTPException

"""
Validation des corps de requête.

Rôle (fonctionnel) :
- Un schéma Pydantic explicite par endpoint (VeilleCreate, VeilleUpdate, HistoriqueCreate, GenerateRequest).
- `check_body()` confronte un corps JSON brut à ce schéma et produit un résultat étiqueté (BodyCheck) :
  succès (value) ou échec (code + error), sans lever d’exception.
- `parse_body()` = check_body().unwrap() : lève AppHTTPException(400) en cas d’échec.

Règles communes :
- Un corps qui n’est pas un objet JSON -> INVALID_BODY.
- Un corps contenant userId / user_id -> USER_ID_NOT_ALLOWED (la propriété vient toujours de la session).
- Les erreurs Pydantic sont traduites en codes métier via `error_codes` déclaré sur chaque schéma.
"""

OWNERSHIP_FIELDS = ("userId", "user_id")

# Types d’erreurs Pydantic considérés comme “champ absent / vide”
MISSING_ERROR_TYPES = {"missing", "string_too_short"}

M = TypeVar("M", bound=BaseModel)


class RequestSchema(BaseModel):
    """
    Base des schémas d’entrée.

    error_codes : {champ (alias JSON): {"missing": (code, error), "invalid": (code, error)}}
    Si "invalid" est absent, "missing" est utilisé pour toute erreur sur le champ.
    """

    error_codes: ClassVar[Dict[str, Dict[str, Tuple[str, str]]]] = {}


@dataclass(frozen=True)
class BodyCheck(Generic[M]):
    """Résultat étiqueté d’une validation : value si ok, sinon code + error (+ details)."""

    value: Optional[M] = None
    code: Optional[str] = None
    error: Optional[str] = None
    details: Any = None

    @property
    def ok(self) -> bool:
        return self.code is None

    def unwrap(self) -> M:
        if self.code is not None:
            raise AppHTTPException(400, self.code, self.error or "Invalid request body", details=self.details)
        return self.value


def _error_details(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors(include_url=False)
    ]


def _translate(schema: Type[RequestSchema], exc: ValidationError) -> BodyCheck:
    """
    Premier code métier parmi les erreurs Pydantic.

    Les champs absents / vides passent avant les valeurs mal typées
    (ex. contenu vide + veilleId "abc" -> MISSING_CONTENU).
    """
    found: list[tuple[str, Tuple[str, str]]] = []
    for err in exc.errors(include_url=False):
        loc = err.get("loc") or ()
        field = loc[0] if loc else None
        codes = schema.error_codes.get(field) if isinstance(field, str) else None
        if not codes:
            continue

        kind = "missing" if err.get("type") in MISSING_ERROR_TYPES else "invalid"
        if kind not in codes:
            kind = "missing"
        found.append((kind, codes[kind]))

    if not found:
        return BodyCheck(code="VALIDATION_ERROR", error="Invalid request body", details=_error_details(exc))

    _, (code, error) = next((f for f in found if f[0] == "missing"), found[0])
    return BodyCheck(code=code, error=error)


def reject_ownership_fields(body: Any) -> BodyCheck:
    """Contrôle préalable commun : objet JSON, sans userId / user_id."""
    if not isinstance(body, Mapping):
        return BodyCheck(code="INVALID_BODY", error="Request body must be a JSON object")

    if any(key in body for key in OWNERSHIP_FIELDS):
        return BodyCheck(code="USER_ID_NOT_ALLOWED", error="User ID cannot be provided in request body")

    return BodyCheck()


def check_body(schema: Type[M], body: Any) -> BodyCheck[M]:
    """Valide un corps brut contre `schema` sans lever d’exception."""
    precheck = reject_ownership_fields(body)
    if not precheck.ok:
        return precheck

    try:
        return BodyCheck(value=schema.model_validate(dict(body)))
    except ValidationError as exc:
        return _translate(schema, exc)


def parse_body(schema: Type[M], body: Any) -> M:
    return check_body(schema, body).unwrap()


def required_id(value: Any, name: str) -> Any:
    """Identifiant obligatoire : null, "" et 0 comptent comme absents (erreur de type "missing")."""
    if value is None or value == "" or value == 0:
        raise PydanticCustomError("missing", "{name} is required", {"name": name})
    return value
