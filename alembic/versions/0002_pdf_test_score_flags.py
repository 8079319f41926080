"""Presence flags for GRE/GMAT scores found in uploaded PDFs

Revision ID: 0002_pdf_test_score_flags
Revises: 0001_initial_schema
Create Date: 2026-10-09

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_pdf_test_score_flags"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None

_TABLE = "profile_test_scores"
_COLUMNS = ("has_gre_scores", "has_gmat_scores")


def _existing_columns() -> set[str]:
    insp = sa.inspect(op.get_bind())
    if _TABLE not in insp.get_table_names():
        return set()
    return {c["name"] for c in insp.get_columns(_TABLE)}


def upgrade() -> None:
    existing = _existing_columns()
    missing = [name for name in _COLUMNS if name not in existing]
    if not missing:
        return
    with op.batch_alter_table(_TABLE, schema=None) as batch_op:
        for name in missing:
            batch_op.add_column(sa.Column(name, sa.Boolean(), nullable=True))


def downgrade() -> None:
    existing = _existing_columns()
    present = [name for name in _COLUMNS if name in existing]
    if not present:
        return
    with op.batch_alter_table(_TABLE, schema=None) as batch_op:
        for name in present:
            batch_op.drop_column(name)
