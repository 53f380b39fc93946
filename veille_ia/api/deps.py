from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.core.errors import AppHTTPException
from veille_ia.core.security import extract_bearer_token, resolve_user_id
from veille_ia.core.settings import settings
from veille_ia.db.session import get_db
from veille_ia.services.report_generator import ReportGenerator

"""
Dépendances API.

Rôle (fonctionnel) :
- Centralise les dépendances réutilisables sur les routes :
  - authentification par session bearer (user_id de l’appelant),
  - pagination limit/offset (défaut par endpoint, plafond commun),
  - parsing des identifiants numériques,
  - générateur de rapports (surchargé en test).
"""

# Entier décimal ASCII, signe optionnel ("²", "+-5" refusés)
INT_RE = re.compile(r"[+-]?[0-9]+")


def session_user(code: str = "UNAUTHORIZED") -> Callable:
    """Fabrique une dépendance qui renvoie le user_id de la session, ou 401 avec `code`."""

    async def _require_user(request: Request, db: AsyncSession = Depends(get_db)) -> str:
        user_id = await resolve_user_id(db, extract_bearer_token(request))
        if not user_id:
            raise AppHTTPException(401, code, "Authentication required")
        return user_id

    return _require_user


# Collections (/veille, /historique, /generate-veille)
CurrentUser = Depends(session_user("UNAUTHORIZED"))

# Ressource unitaire (/veille/{id})
CurrentUserById = Depends(session_user("AUTH_REQUIRED"))


def parse_int(value: Optional[str]) -> Optional[int]:
    """Entier base 10 (signe optionnel), sinon None."""
    if value is None:
        return None
    text = value.strip()
    if not INT_RE.fullmatch(text):
        return None
    return int(text)


def parse_path_id(veille_id: str) -> int:
    parsed = parse_int(veille_id)
    if parsed is None:
        raise AppHTTPException(400, "INVALID_ID", "Valid ID is required")
    return parsed


@dataclass(frozen=True)
class Page:
    limit: int
    offset: int


def clamp_page(limit: Optional[str], offset: Optional[str], default_limit: int) -> Page:
    """limit dans [1, MAX_PAGE_SIZE] (défaut si absent/non numérique), offset >= 0."""
    max_limit = settings.MAX_PAGE_SIZE

    parsed_limit = parse_int(limit)
    if parsed_limit is None:
        parsed_limit = default_limit
    parsed_offset = parse_int(offset)
    if parsed_offset is None:
        parsed_offset = 0

    return Page(limit=max(1, min(parsed_limit, max_limit)), offset=max(0, parsed_offset))


def pagination(default_limit: Callable[[], int]) -> Callable:
    """Dépendance de pagination ; le défaut est lu dans les settings à chaque requête."""

    def _page(
        limit: Optional[str] = Query(None),
        offset: Optional[str] = Query(None),
    ) -> Page:
        return clamp_page(limit, offset, default_limit())

    return _page


VeillePage = Depends(pagination(lambda: settings.VEILLE_PAGE_SIZE))
HistoriquePage = Depends(pagination(lambda: settings.HISTORIQUE_PAGE_SIZE))


def get_report_generator() -> ReportGenerator:
    return ReportGenerator()
