"""
scripts

Scripts CLI de maintenance / dev local.

- seed_demo : crée une session bearer de démo + quelques veilles (DATABASE_URL_SYNC).
- generate_one : lance la génération IA d’une veille sans passer par l’API.

Les scripts orchestrent et appellent les modules de `veille_ia/` (services, db…) :
pas de logique métier “centrale” ici.
"""
