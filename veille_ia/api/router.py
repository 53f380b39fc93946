from fastapi import APIRouter

from .health import router as health_router
from .status import router as status_router

from veille_ia.api.veille import router as veille_router
from veille_ia.api.historique import router as historique_router
from veille_ia.api.generate import router as generate_router

"""
Router principal de l’API.

Rôle (fonctionnel) :
- Regroupe les routeurs par domaine (health, system, veille, historique, génération).
- Sert de point d’entrée unique pour l’inclusion dans l’application FastAPI.
"""

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(status_router)
api_router.include_router(veille_router)
api_router.include_router(historique_router)
api_router.include_router(generate_router)
