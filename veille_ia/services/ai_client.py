from __future__ import annotations

import logging
from typing import Optional, Protocol

from openai import AsyncOpenAI

from veille_ia.core.settings import settings

"""
Client IA (OpenAI).

Rôle (fonctionnel) :
- Encapsule l’appel “chat completions” utilisé pour générer un rapport de veille.
- Un seul appel, sans retry côté client (max_retries=0) : les erreurs remontent telles quelles
  (AuthenticationError, RateLimitError, …) et sont traduites par le générateur.

Le protocole CompletionClient permet d’injecter un faux client en test.
"""

log = logging.getLogger("veille_ia.ai")


class CompletionClient(Protocol):
    async def complete(self, system: str, prompt: str) -> str: ...


class OpenAICompletionClient:
    """Implémentation OpenAI (AsyncOpenAI) : renvoie le texte du premier choix, ou ""."""

    def __init__(
        self,
        api_key: str,
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.model = model or settings.OPENAI_MODEL
        self.temperature = settings.OPENAI_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.OPENAI_MAX_TOKENS
        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=timeout or settings.OPENAI_TIMEOUT_S,
            max_retries=0,
        )

    async def complete(self, system: str, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        choice = response.choices[0] if response.choices else None
        if not choice or not getattr(choice.message, "content", None):
            log.warning("ai_empty_response", extra={"model": self.model})
            return ""
        return choice.message.content
