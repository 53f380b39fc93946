"""
veille_ia.core

Package “cœur” de l’application : tout ce qui est transversal (cross-cutting concerns),
indépendant du domaine veille / historique.

- settings
  Configuration centralisée (variables d’environnement, clé OpenAI, pagination, URLs DB).

- errors
  Format d’erreur API uniforme ({error, code, message?, details?, request_id}) et
  l’exception applicative AppHTTPException.

- logging
  Logs JSON sur stdout, enrichis du request_id et d’extras structurés.

- request_id
  Identifiant de corrélation par requête (ContextVar).

- rate_limit
  Limiteur en mémoire appliqué à la génération IA.

- security
  Résolution d’un bearer token en identifiant utilisateur (sessions en lecture seule).
"""
