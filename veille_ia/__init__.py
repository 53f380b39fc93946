"""
veille_ia

Package racine du backend Veille IA.

Rôle (fonctionnel) :
- API authentifiée de veille : créer un sujet, demander un rapport généré par IA,
  conserver le résultat et consulter l’historique des rapports.

Organisation (haute-level) :
- veille_ia.api      : routes FastAPI (contrats HTTP, dépendances, sérialisation)
- veille_ia.core     : briques transverses (settings, errors, logs, request_id, rate-limit, sessions)
- veille_ia.db       : base SQLAlchemy + session async
- veille_ia.models   : modèles ORM (veille, historique_veille, session)
- veille_ia.schemas  : schémas Pydantic (entrées/sorties API, validation des corps)
- veille_ia.services : logique métier (CRUD, génération IA, découpage des rapports)
"""
