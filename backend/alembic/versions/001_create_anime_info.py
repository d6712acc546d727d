"""Create the anime_info table.

Revision ID: 001_create_anime_info
Revises: None
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_create_anime_info"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "anime_info",
        sa.Column("id", sa.Integer, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("tag", sa.String(255), nullable=True),
        sa.Column("country", sa.String(50), nullable=True),
        sa.Column("status", sa.Integer, nullable=True),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_anime_info_country", "anime_info", ["country"])
    op.create_index("idx_anime_info_like_count", "anime_info", ["like_count"])


def downgrade() -> None:
    op.drop_index("idx_anime_info_like_count", table_name="anime_info")
    op.drop_index("idx_anime_info_country", table_name="anime_info")
    op.drop_table("anime_info")
