"""Environnement Alembic.

Rôle (fonctionnel) :
- Branche Alembic sur la metadata ORM (veille_ia.db.base.Base) et sur DATABASE_URL_SYNC.
- La table `session` appartient au fournisseur d’authentification : elle est exclue
  de l’autogénération (include_object).
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from veille_ia.core.settings import settings
from veille_ia.db.base import Base
import veille_ia.models  # noqa: F401  (enregistre les tables dans la metadata)

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL_SYNC)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

EXTERNAL_TABLES = {"session"}


def include_object(obj, name, type_, reflected, compare_to):
    if type_ == "table" and name in EXTERNAL_TABLES:
        return False
    return True


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        include_object=include_object,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_object=include_object,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
