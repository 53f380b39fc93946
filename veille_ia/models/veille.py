from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from veille_ia.db.base import Base, utcnow

"""
Model Veille.

Rôle (fonctionnel) :
- Représente un sujet de veille créé par un utilisateur (titre, sujet, contexte optionnel).
- Porte le dernier rapport généré par l’IA (resultat), null tant qu’aucune génération n’a abouti.

Propriété :
- user_id est toujours dérivé de la session validée, jamais du corps de requête.

Suppression :
- Suppression physique. Les entrées d’historique ne sont pas supprimées avec la veille
  (pas de FK en cascade sur historique_veille.veille_id).

Index :
- (user_id, created_at) : écran “liste” d’un utilisateur trié par date.
"""


class Veille(Base):
    __tablename__ = "veille"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Propriétaire (identifiant issu de la session)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    titre: Mapped[str] = mapped_column(Text, nullable=False)
    sujet: Mapped[str] = mapped_column(Text, nullable=False)
    contexte: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Dernier rapport IA (texte libre)
    resultat: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("ix_veille_user_created", "user_id", "created_at"),)
