from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase

"""
DB Base.

Rôle (fonctionnel) :
- Définit la classe Base SQLAlchemy commune à tous les modèles ORM (veille, historique, session).
- Sert de point d’ancrage pour la metadata (migrations Alembic, création de schéma en test).
- Fournit l’horloge UTC utilisée pour tous les horodatages persistés.
"""


def utcnow() -> datetime:
    """Horodatage “aware” en UTC (created_at / updated_at)."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Certains moteurs (SQLite) relisent des datetimes naïfs : on les considère en UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class Base(DeclarativeBase):
    """Classe racine ORM (SQLAlchemy Declarative)."""
    pass
