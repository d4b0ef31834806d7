"""
Initial schema: reading records and the trigger state document.

`data` holds one row per ingested message keyed by a lower-case ULID, with the
flattened reading kept verbatim in a JSON column. `trigger_state` holds the
single hysteresis flag row.

Revision ID: 001
Revises: None
Create Date: 2024-05-01
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "data",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("device", sa.String(), nullable=False),
        sa.Column("time", sa.String(), nullable=False),
        sa.Column("buffered", sa.String(), nullable=False),
        sa.Column("document", sa.JSON(), nullable=False),
    )
    op.create_index("ix_data_device", "data", ["device"])

    op.create_table(
        "trigger_state",
        sa.Column("key", sa.String(), primary_key=True),
        sa.Column("triggered", sa.Boolean(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("trigger_state")
    op.drop_index("ix_data_device", table_name="data")
    op.drop_table("data")
