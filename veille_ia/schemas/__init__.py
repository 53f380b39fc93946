"""
veille_ia.schemas

Package des schémas API (Pydantic).

Rôle (fonctionnel) :
- Modèles d’entrée (un schéma explicite par endpoint, validé via schemas.validation).
- Modèles de sortie (camelCase côté JSON : userId, createdAt, veilleId…).
- Séparés des modèles ORM (veille_ia.models).
"""
