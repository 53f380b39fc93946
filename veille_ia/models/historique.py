from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from veille_ia.db.base import Base, utcnow

"""
Model HistoriqueEntry.

Rôle (fonctionnel) :
- Journal en ajout seul des contenus générés pour une veille.
- Une entrée par génération réussie (ou par ajout manuel via POST /historique).
- Jamais modifiée ni supprimée par l’API.

Relation :
- veille_id référence veille.id sans contrainte FK : supprimer une veille laisse ses entrées.
"""


class HistoriqueEntry(Base):
    __tablename__ = "historique_veille"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    veille_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    contenu: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("ix_historique_user_created", "user_id", "created_at"),)
