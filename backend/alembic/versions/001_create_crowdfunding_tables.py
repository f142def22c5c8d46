"""Create users, campaigns, donations, deposits and supporting tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _fk(column: str, target: str, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        column,
        sa.UUID(),
        sa.ForeignKey(f"{target}.id", ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("type_user", sa.String(20), nullable=False),
        sa.Column("cpf", sa.String(14), nullable=True, unique=True),
        sa.Column("cnpj", sa.String(18), nullable=True, unique=True),
        sa.Column("birthdate", sa.Date(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("total_donated", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_campaigns_donated", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_campaigns_created", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("type_user IN ('INDIVIDUAL', 'COMPANY')", name="ck_users_type_user"),
    )

    # --- campaigns ---
    op.create_table(
        "campaigns",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("image_key", sa.Text(), nullable=True),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("request_emergency", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("value_required", sa.Numeric(12, 2), nullable=False),
        sa.Column("value_donated", sa.Numeric(12, 2), nullable=False, server_default="0"),
        _fk("user_id", "users", ondelete="RESTRICT"),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("reason_suspension", sa.Text(), nullable=True),
        sa.Column("have_address", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("address_street", sa.String(255), nullable=True),
        sa.Column("address_number", sa.String(20), nullable=True),
        sa.Column("address_complement", sa.String(255), nullable=True),
        sa.Column("address_neighborhood", sa.String(255), nullable=True),
        sa.Column("address_city", sa.String(255), nullable=True),
        sa.Column("address_state", sa.String(2), nullable=True),
        sa.Column("address_zipcode", sa.String(9), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'FINISHED', 'SUSPENDED')", name="ck_campaigns_status"
        ),
        sa.CheckConstraint("value_donated >= 0", name="ck_campaigns_value_donated"),
    )
    op.create_index("ix_campaigns_user_id", "campaigns", ["user_id"])

    op.create_table(
        "campaign_comments",
        _id(),
        _fk("campaign_id", "campaigns"),
        _fk("user_id", "users"),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("user_image", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_campaign_comments_campaign_id", "campaign_comments", ["campaign_id"])

    op.create_table(
        "campaign_donors",
        _id(),
        _fk("campaign_id", "campaigns"),
        _fk("user_id", "users", ondelete="SET NULL", nullable=True),
        sa.Column("username", sa.String(255), nullable=True),
        sa.Column("user_image", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "donated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
        ),
        *_timestamps(),
    )
    op.create_index("ix_campaign_donors_campaign_id", "campaign_donors", ["campaign_id"])

    # --- donations ---
    op.create_table(
        "donations",
        _id(),
        sa.Column("payment_id", sa.String(64), nullable=True, unique=True),
        sa.Column("preference_id", sa.String(128), nullable=True),
        _fk("campaign_id", "campaigns"),
        _fk("user_id", "users", ondelete="SET NULL", nullable=True),
        sa.Column("campaign_title", sa.String(255), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("status_detail", sa.Text(), nullable=True),
        sa.Column("credited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refunded_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_donations_preference_id", "donations", ["preference_id"])
    op.create_index("ix_donations_campaign_id", "donations", ["campaign_id"])
    op.create_index("ix_donations_user_id", "donations", ["user_id"])

    # --- deposit_requests ---
    op.create_table(
        "deposit_requests",
        _id(),
        _fk("user_id", "users", ondelete="RESTRICT"),
        _fk("campaign_id", "campaigns"),
        sa.Column("campaign_title", sa.String(255), nullable=False),
        sa.Column("value_donated", sa.Numeric(12, 2), nullable=False),
        sa.Column("request_message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("justification_admin", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('PENDING', 'COMPLETED', 'REJECTED')",
            name="ck_deposit_requests_status",
        ),
    )
    op.create_index("ix_deposit_requests_user_id", "deposit_requests", ["user_id"])
    op.create_index("ix_deposit_requests_campaign_id", "deposit_requests", ["campaign_id"])

    # --- identity_validations ---
    op.create_table(
        "identity_validations",
        _id(),
        sa.Column(
            "user_id",
            sa.UUID(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("cnpj", sa.String(18), nullable=True),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("observation", sa.Text(), nullable=True),
        sa.Column("observation_read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("documents", sa.JSON(), nullable=False, server_default="[]"),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name="ck_identity_validations_status",
        ),
    )

    # --- payout_configs ---
    op.create_table(
        "payout_configs",
        _id(),
        sa.Column(
            "user_id",
            sa.UUID(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("receipt_type", sa.String(10), nullable=False),
        sa.Column("pix_key", sa.String(255), nullable=True),
        sa.Column("pix_type", sa.String(20), nullable=True),
        sa.Column("bank_name", sa.String(255), nullable=True),
        sa.Column("agency", sa.String(20), nullable=True),
        sa.Column("account", sa.String(30), nullable=True),
        sa.Column("account_type", sa.String(20), nullable=True),
        sa.Column("cnpj", sa.String(18), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "receipt_type IN ('PIX', 'BANK')", name="ck_payout_configs_receipt_type"
        ),
    )

    # --- reports ---
    op.create_table(
        "reports",
        _id(),
        _fk("campaign_id", "campaigns"),
        _fk("user_id", "users", ondelete="SET NULL", nullable=True),
        sa.Column("reason", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ANALYZED', 'RESOLVED')", name="ck_reports_status"
        ),
    )
    op.create_index("ix_reports_campaign_id", "reports", ["campaign_id"])

    # --- financial_reports ---
    op.create_table(
        "financial_reports",
        _id(),
        _fk("campaign_id", "campaigns"),
        _fk("user_id", "users"),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("file_format", sa.String(10), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_key", sa.Text(), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "type IN ('FINANCIAL', 'ACCOUNTING')", name="ck_financial_reports_type"
        ),
    )
    op.create_index("ix_financial_reports_campaign_id", "financial_reports", ["campaign_id"])
    op.create_index("ix_financial_reports_user_id", "financial_reports", ["user_id"])

    # --- banks (read-only directory) ---
    op.create_table(
        "banks",
        sa.Column("code", sa.String(10), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("banks")
    op.drop_table("financial_reports")
    op.drop_table("reports")
    op.drop_table("payout_configs")
    op.drop_table("identity_validations")
    op.drop_table("deposit_requests")
    op.drop_table("donations")
    op.drop_table("campaign_donors")
    op.drop_table("campaign_comments")
    op.drop_table("campaigns")
    op.drop_table("users")
