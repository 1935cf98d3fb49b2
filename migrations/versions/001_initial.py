"""Initial schema.

Tables for Flugzeuge, their Modell and their Sitzplaetze, matching the
current ORM models.
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Flugzeuge
    op.create_table(
        "flugzeug",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("preis", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("einsatzbereit", sa.Boolean(), nullable=True),
        sa.Column("baujahr", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # Modell (one per Flugzeug)
    op.create_table(
        "modell",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("modell", sa.String(length=40), nullable=False),
        sa.Column(
            "flugzeug_id",
            sa.Integer(),
            sa.ForeignKey("flugzeug.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
    )

    # Sitzplaetze
    op.create_table(
        "sitzplatz",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("sitzplatzklasse", sa.String(length=32), nullable=False),
        sa.Column(
            "flugzeug_id",
            sa.Integer(),
            sa.ForeignKey("flugzeug.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_sitzplatz_flugzeug_id", "sitzplatz", ["flugzeug_id"])


def downgrade() -> None:
    op.drop_index("ix_sitzplatz_flugzeug_id", table_name="sitzplatz")
    op.drop_table("sitzplatz")
    op.drop_table("modell")
    op.drop_table("flugzeug")
