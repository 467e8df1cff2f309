"""aid_request_version

Row version for compare-and-swap saves of aid requests.

Revision ID: 0002_aid_request_version
Revises: 0001_initial_tables
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0002_aid_request_version"
down_revision: Union[str, Sequence[str], None] = "0001_initial_tables"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("aid_requests") as batch_op:
        batch_op.add_column(
            sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1"))
        )


def downgrade() -> None:
    with op.batch_alter_table("aid_requests") as batch_op:
        batch_op.drop_column("version")
