from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from veille_ia.db.base import Base

"""
Model UserSession.

Rôle (fonctionnel) :
- Miroir en lecture seule de la table `session` gérée par le fournisseur d’authentification.
- Seuls token, user_id et expires_at sont utilisés (résolution du bearer token).
"""


class UserSession(Base):
    __tablename__ = "session"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    token: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
