"""
veille_ia.services

Package “services” : logique applicative indépendante des endpoints HTTP.

- veille_service / historique_service : CRUD scopé au propriétaire.
- report_generator : prompt + appel IA + persistance transactionnelle.
- ai_client : client OpenAI (chat completions, sans retry).
- report_parser : découpage d’un rapport en sections (fonction pure, affichage).
"""
