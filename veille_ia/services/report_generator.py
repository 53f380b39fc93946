from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import openai
from sqlalchemy.ext.asyncio import AsyncSession

from veille_ia.core.errors import AppHTTPException
from veille_ia.core.settings import settings
from veille_ia.db.base import utcnow
from veille_ia.models.historique import HistoriqueEntry
from veille_ia.models.veille import Veille
from veille_ia.schemas.generation import GenerateRequest
from veille_ia.services.ai_client import CompletionClient, OpenAICompletionClient
from veille_ia.services.veille_service import get_owned_veille

"""
Report Generator.

Rôle (fonctionnel) :
- Génère un rapport de veille par IA pour une veille de l’appelant :
  1) vérifie existence + propriété de la veille,
  2) vérifie que la clé OpenAI est configurée (sinon OPENAI_KEY_MISSING, pas de retry),
  3) construit le prompt (sujet + contexte, 5 sections imposées, en français),
  4) appelle le modèle une seule fois,
  5) refuse une réponse vide (GENERATION_FAILED, aucune écriture),
  6) persiste dans UNE transaction : veille.resultat + updated_at, et une entrée d’historique
     avec le même contenu et le même horodatage.

Traduction des erreurs fournisseur :
- AuthenticationError -> 500 OPENAI_AUTH_ERROR (problème de configuration)
- RateLimitError      -> 429 OPENAI_RATE_LIMIT (à réessayer plus tard, par le client)
- autre erreur OpenAI -> 500 INTERNAL_ERROR (message d’origine repris)
"""

log = logging.getLogger("veille_ia.generator")

SYSTEM_PROMPT = (
    "Tu es un expert en veille stratégique et analyse d'informations. "
    "Tu fournis des analyses complètes, structurées et pertinentes en français."
)

REPORT_SECTIONS = (
    "Un résumé exécutif",
    "Les points clés et tendances actuelles",
    "Les acteurs principaux et innovations récentes",
    "Les enjeux et perspectives d'avenir",
    "Des recommandations pratiques",
)


def build_prompt(sujet: str, contexte: Optional[str] = None) -> str:
    """Prompt fixe : sujet (trimé), contexte optionnel, puis les 5 sections attendues."""
    prompt = (
        "Tu es un assistant spécialisé dans la veille et l'analyse d'informations. \n\n"
        f"Sujet de la veille : {sujet.strip()}"
    )

    if contexte and contexte.strip():
        prompt += f"\n\nContexte additionnel : {contexte.strip()}"

    sections = "\n".join(f"{i}. {label}" for i, label in enumerate(REPORT_SECTIONS, start=1))
    prompt += (
        "\n\nGénère une veille complète et détaillée sur ce sujet. La veille doit inclure :\n"
        f"{sections}\n\n"
        "Format la réponse de manière claire et structurée en français."
    )
    return prompt


@dataclass(frozen=True)
class GenerationResult:
    veille: Veille
    content: str


class ReportGenerator:
    """
    Orchestration génération + persistance.

    - api_key : clé OpenAI (défaut : settings.OPENAI_API_KEY, lue à l’appel).
    - client_factory : construit le CompletionClient à partir de la clé (injectable en test).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        client_factory: Optional[Callable[[str], CompletionClient]] = None,
    ) -> None:
        self._api_key = api_key
        self._client_factory = client_factory or (lambda key: OpenAICompletionClient(key))

    @property
    def api_key(self) -> str:
        key = self._api_key if self._api_key is not None else settings.OPENAI_API_KEY
        return (key or "").strip()

    async def _complete(self, client: CompletionClient, prompt: str, user_id: str, veille_id: int) -> str:
        start = time.perf_counter()
        try:
            return await client.complete(SYSTEM_PROMPT, prompt)
        except openai.AuthenticationError as exc:
            log.error("report_generation_failed", extra={"user_id": user_id, "veille_id": veille_id, "code": "OPENAI_AUTH_ERROR"})
            raise AppHTTPException(
                500,
                "OPENAI_AUTH_ERROR",
                "Invalid OpenAI API key",
                message="La clé API OpenAI est invalide",
            ) from exc
        except openai.RateLimitError as exc:
            log.warning("report_generation_failed", extra={"user_id": user_id, "veille_id": veille_id, "code": "OPENAI_RATE_LIMIT"})
            raise AppHTTPException(
                429,
                "OPENAI_RATE_LIMIT",
                "OpenAI rate limit exceeded",
                message="Limite de requêtes OpenAI atteinte. Veuillez réessayer plus tard.",
            ) from exc
        except openai.OpenAIError as exc:
            log.exception("report_generation_failed", extra={"user_id": user_id, "veille_id": veille_id, "code": "INTERNAL_ERROR"})
            raise AppHTTPException(500, "INTERNAL_ERROR", f"Internal server error: {exc}") from exc
        finally:
            log.info(
                "ai_call",
                extra={"veille_id": veille_id, "duration_ms": int((time.perf_counter() - start) * 1000)},
            )

    async def generate(self, db: AsyncSession, user_id: str, request: GenerateRequest) -> GenerationResult:
        veille = await get_owned_veille(db, user_id, request.veille_id, not_found_code="VEILLE_NOT_FOUND")

        api_key = self.api_key
        if not api_key:
            raise AppHTTPException(
                500,
                "OPENAI_KEY_MISSING",
                "OpenAI API key not configured",
                message="Veuillez configurer la clé API OpenAI dans les variables d'environnement",
            )

        # Libère la connexion avant l’appel IA (jusqu’à OPENAI_TIMEOUT_S)
        await db.commit()

        client = self._client_factory(api_key)
        prompt = build_prompt(request.sujet, request.contexte)
        content = (await self._complete(client, prompt, user_id, veille.id) or "").strip()

        if not content:
            log.warning("report_generation_failed", extra={"user_id": user_id, "veille_id": veille.id, "code": "GENERATION_FAILED"})
            raise AppHTTPException(500, "GENERATION_FAILED", "No content generated")

        # Une seule transaction : veille + historique
        now = utcnow()
        veille.resultat = content
        veille.updated_at = now
        entry = HistoriqueEntry(veille_id=veille.id, user_id=user_id, contenu=content, created_at=now)
        db.add(entry)

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(veille)

        log.info(
            "report_generated",
            extra={"user_id": user_id, "veille_id": veille.id, "historique_id": entry.id},
        )
        return GenerationResult(veille=veille, content=content)
