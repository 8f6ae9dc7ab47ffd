"""Create transfer quota tables.

Revision ID: t1q2a3b4c5d6
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "t1q2a3b4c5d6"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create the ledger, settings and watermark tables.

    transfer_quota: one row per account; limit 0 means untracked.
    transfer_quota_setting: global warning/critical percentages.
    transfer_quota_watermark: external download counter already billed.
    """
    op.create_table(
        "transfer_quota",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(64), nullable=False),
        sa.Column("monthly_limit_bytes", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("current_usage_bytes", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("last_reset_at", sa.DateTime(), nullable=False),
        sa.Column("warning_latch", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("critical_latch", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_transfer_quota"),
        sa.UniqueConstraint("account_id", name="uq_transfer_quota_account_id"),
    )

    op.create_table(
        "transfer_quota_setting",
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("value", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("key", name="pk_transfer_quota_setting"),
    )

    op.create_table(
        "transfer_quota_watermark",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(64), nullable=False),
        sa.Column("last_processed_count", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_transfer_quota_watermark"),
        sa.UniqueConstraint("account_id", name="uq_transfer_quota_watermark_account_id"),
    )


def downgrade():
    """Drop every transfer quota table (uninstall)."""
    op.drop_table("transfer_quota_watermark")
    op.drop_table("transfer_quota_setting")
    op.drop_table("transfer_quota")
