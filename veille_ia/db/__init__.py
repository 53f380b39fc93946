"""
veille_ia.db

Package base de données : classe Base ORM, engine async et sessions.

- session : AsyncSession pour FastAPI (Depends(get_db)).
- migrations : Alembic (côté sync) via DATABASE_URL_SYNC.
"""
