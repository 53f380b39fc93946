from __future__ import annotations

import sys
import asyncio
import argparse
from pathlib import Path

# Windows: compat event loop (évite certains soucis avec drivers async PostgreSQL)
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

from veille_ia.core.errors import AppHTTPException
from veille_ia.db.session import AsyncSessionLocal
from veille_ia.schemas.generation import GenerateRequest
from veille_ia.services.report_generator import ReportGenerator
from veille_ia.services.veille_service import get_owned_veille

"""
Script CLI: generate_one

Rôle (fonctionnel) :
- Génère le rapport IA d’une veille sans passer par l’API HTTP.
- Utilise le sujet/contexte enregistrés sur la veille (sauf --sujet/--contexte).
- Persiste le résultat (veille + historique) exactement comme POST /generate-veille.

Usage typique :
- Vérifier de bout en bout DB + clé OpenAI + prompt.
"""


async def main(veille_id: int, user_id: str, sujet: str | None, contexte: str | None) -> int:
    async with AsyncSessionLocal() as db:
        try:
            veille = await get_owned_veille(db, user_id, veille_id)
            request = GenerateRequest(
                veille_id=veille.id,
                sujet=sujet or veille.sujet,
                contexte=contexte if contexte is not None else veille.contexte,
            )
            result = await ReportGenerator().generate(db, user_id, request)
        except AppHTTPException as exc:
            print(f"Erreur {exc.status_code} {exc.code}: {exc.detail.get('error')}")
            return 1

    print("Veille:", result.veille.id, "-", result.veille.titre)
    print(result.content)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("veille_id", type=int)
    parser.add_argument("--user", required=True, help="Propriétaire de la veille")
    parser.add_argument("--sujet", default=None)
    parser.add_argument("--contexte", default=None)
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.veille_id, args.user, args.sujet, args.contexte)))
