"""
veille_ia.models

Package ORM (SQLAlchemy) : entités persistées en base.

- Veille : sujet de veille + dernier rapport IA.
- HistoriqueEntry : journal des rapports générés.
- UserSession : sessions d’authentification (lecture seule).
"""

from veille_ia.models.veille import Veille
from veille_ia.models.historique import HistoriqueEntry
from veille_ia.models.user_session import UserSession

__all__ = ["Veille", "HistoriqueEntry", "UserSession"]
