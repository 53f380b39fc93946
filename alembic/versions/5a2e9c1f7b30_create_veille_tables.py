"""Création des tables veille et historique_veille.

Rôle (fonctionnel) :
- veille : sujets de veille par utilisateur + dernier rapport IA (resultat).
- historique_veille : journal en ajout seul des rapports générés.
- Pas de FK historique_veille.veille_id -> veille.id : supprimer une veille conserve son historique.
- La table `session` (fournisseur d’auth) n’est pas gérée ici.

Revision ID: 5a2e9c1f7b30
Revises:
Create Date: 2025-11-03
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Identifiants Alembic
revision: str = "5a2e9c1f7b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Application des changements de schéma."""
    op.create_table(
        "veille",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("titre", sa.Text(), nullable=False),
        sa.Column("sujet", sa.Text(), nullable=False),
        sa.Column("contexte", sa.Text(), nullable=True),
        sa.Column("resultat", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_veille_user_id", "veille", ["user_id"], unique=False)
    op.create_index("ix_veille_user_created", "veille", ["user_id", "created_at"], unique=False)

    op.create_table(
        "historique_veille",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("veille_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("contenu", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_historique_veille_veille_id", "historique_veille", ["veille_id"], unique=False)
    op.create_index("ix_historique_veille_user_id", "historique_veille", ["user_id"], unique=False)
    op.create_index("ix_historique_user_created", "historique_veille", ["user_id", "created_at"], unique=False)


def downgrade() -> None:
    """Retour arrière des changements de schéma."""
    op.drop_index("ix_historique_user_created", table_name="historique_veille")
    op.drop_index("ix_historique_veille_user_id", table_name="historique_veille")
    op.drop_index("ix_historique_veille_veille_id", table_name="historique_veille")
    op.drop_table("historique_veille")

    op.drop_index("ix_veille_user_created", table_name="veille")
    op.drop_index("ix_veille_user_id", table_name="veille")
    op.drop_table("veille")
