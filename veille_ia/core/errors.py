from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException

"""
Core Errors.

Rôle (fonctionnel) :
- Standardise le format des erreurs renvoyées par l’API (payload homogène).
- Fournit une exception applicative (AppHTTPException) pour lever des erreurs métier de façon cohérente.
- Le front lit `code` (stable, machine-readable) ; `error` et `message` sont destinés à l’humain.

Convention de réponse (exemple) :
{
  "error": "Veille not found",
  "code": "NOT_FOUND",
  "message": "...",        (optionnel)
  "details": {...},        (optionnel)
  "request_id": "..."
}
"""


def error_payload(
    *,
    code: str,
    error: str,
    request_id: str,
    message: Optional[str] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Construit un payload d’erreur homogène pour l’API."""
    payload: Dict[str, Any] = {"error": error, "code": code}
    if message is not None:
        payload["message"] = message
    if details is not None:
        payload["details"] = details
    payload["request_id"] = request_id
    return payload


class AppHTTPException(HTTPException):
    """
    Exception applicative standardisée.

    Usage :
    - Lever une erreur “métier” avec un code stable et un libellé explicite.
    - Laisser la couche API/middlewares produire une réponse cohérente.

    Exemple :
        raise AppHTTPException(404, "NOT_FOUND", "Veille not found")
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        error: str,
        *,
        message: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(
            status_code=status_code,
            detail={"code": code, "error": error, "message": message, "details": details},
        )

    @property
    def code(self) -> str:
        return self.detail["code"]
