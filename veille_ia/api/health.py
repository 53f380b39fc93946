from fastapi import APIRouter

from veille_ia.core.settings import settings

"""
API Health.

Rôle (fonctionnel) :
- Endpoint simple (sans auth) pour vérifier que l’API répond.
- Expose l’environnement et le modèle IA configuré.
"""

router = APIRouter()


@router.get("/health")
def health():
    return {
        "status": "ok",
        "env": settings.ENV,
        "model": settings.OPENAI_MODEL,
    }
