# scripts/seed_demo.py
from __future__ import annotations

import argparse
import secrets
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

from sqlalchemy import create_engine, delete
from sqlalchemy.orm import sessionmaker

# Permet de lancer le script depuis la racine du projet sans installation
ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

from veille_ia.core.settings import settings
from veille_ia.models.historique import HistoriqueEntry
from veille_ia.models.user_session import UserSession
from veille_ia.models.veille import Veille

"""
Script CLI: seed_demo

Rôle (fonctionnel) :
- Crée une session de démo (token bearer) pour un utilisateur, valable N jours.
- Crée quelques veilles (sans résultat) pour cet utilisateur.
- Affiche le token à utiliser dans `Authorization: Bearer <token>`.

Notes :
- Utilise DATABASE_URL_SYNC (comme Alembic).
- En production, la table `session` est alimentée par le fournisseur d’auth : ce script sert au dev local.
"""

DEMO_VEILLES = [
    ("IA générative en santé", "Usages de l'IA générative dans le diagnostic médical", "Focus Europe, 2024-2025"),
    ("Batteries solides", "État de l'art des batteries à électrolyte solide", None),
    ("Cybersécurité PME", "Menaces ransomware visant les PME françaises", "Secteur industriel"),
    ("Agents autonomes", "Frameworks d'agents LLM et cas d'usage en entreprise", None),
]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def seed(user_id: str, days: int, reset: bool) -> str:
    engine = create_engine(settings.DATABASE_URL_SYNC, future=True)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    with SessionLocal() as db:
        if reset:
            db.execute(delete(HistoriqueEntry).where(HistoriqueEntry.user_id == user_id))
            db.execute(delete(Veille).where(Veille.user_id == user_id))
            db.execute(delete(UserSession).where(UserSession.user_id == user_id))
            db.commit()
            print("✅ Reset done (demo data of this user deleted).")

        token = secrets.token_urlsafe(32)
        db.add(
            UserSession(
                id=str(uuid4()),
                token=token,
                user_id=user_id,
                expires_at=now_utc() + timedelta(days=days),
            )
        )

        for i, (titre, sujet, contexte) in enumerate(DEMO_VEILLES):
            ts = now_utc() - timedelta(minutes=len(DEMO_VEILLES) - i)
            db.add(Veille(user_id=user_id, titre=titre, sujet=sujet, contexte=contexte, created_at=ts, updated_at=ts))

        db.commit()

    print("✅ Seed terminé.")
    print(f"   - Utilisateur: {user_id}")
    print(f"   - Veilles créées: {len(DEMO_VEILLES)}")
    print(f"   - Token (valable {days} j): {token}")
    return token


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--user", default="demo-user", help="Identifiant utilisateur de démo")
    parser.add_argument("--days", type=int, default=7, help="Durée de validité de la session (jours)")
    parser.add_argument("--reset", action="store_true", help="Supprime les données de cet utilisateur avant de reseed")
    args = parser.parse_args()

    seed(user_id=args.user, days=args.days, reset=args.reset)


if __name__ == "__main__":
    main()
