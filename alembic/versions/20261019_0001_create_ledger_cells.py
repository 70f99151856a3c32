"""create ledger_cells table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 06:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ledger_cells",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("ledger_name", sa.String(length=120), nullable=False, comment="Logical ledger (worksheet) name"),
        sa.Column("row_number", sa.Integer(), nullable=False, comment="1-based row"),
        sa.Column("column_index", sa.Integer(), nullable=False, comment="0-based column"),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("background_color", sa.String(length=7), nullable=True, comment="#RRGGBB background colour"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "ledger_name",
            "row_number",
            "column_index",
            name="uq_ledger_cells_ledger_row_column",
        ),
    )
    op.create_index(
        "ix_ledger_cells_ledger_row",
        "ledger_cells",
        ["ledger_name", "row_number"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_ledger_cells_ledger_row", table_name="ledger_cells")
    op.drop_table("ledger_cells")
