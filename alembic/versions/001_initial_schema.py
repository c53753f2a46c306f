"""Initial migration: users, school hierarchy, teachers, campaigns, contributions, products and terms.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("uq_users_username_lower", "users", [sa.text("lower(username)")], unique=True)
    op.create_index("uq_users_email_lower", "users", [sa.text("lower(email)")], unique=True)

    op.create_table(
        "states",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("abbr", sa.String(10), nullable=False),
        *_timestamps(),
    )
    op.create_index("uq_states_name_lower", "states", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "districts",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("state_id", sa.Uuid, sa.ForeignKey("states.id", ondelete="RESTRICT"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_districts_state_id", "districts", ["state_id"])

    op.create_table(
        "schools",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("district_id", sa.Uuid, sa.ForeignKey("districts.id", ondelete="RESTRICT"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_schools_district_id", "schools", ["district_id"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("school_id", sa.Uuid, sa.ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("school_id", "first_name", "last_name", name="uq_teachers_school_name"),
    )
    op.create_index("ix_teachers_school_id", "teachers", ["school_id"])

    # campaignable_id has no FK: it points into schools or teachers depending on campaignable_type
    op.create_table(
        "campaigns",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("state_id", sa.Uuid, sa.ForeignKey("states.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("district_id", sa.Uuid, sa.ForeignKey("districts.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("school_id", sa.Uuid, sa.ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("campaignable_type", sa.String(20), nullable=False),
        sa.Column("campaignable_id", sa.Uuid, nullable=False),
        sa.Column("school_wide", sa.Boolean, nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("uq_campaigns_name_lower", "campaigns", [sa.text("lower(name)")], unique=True)
    op.create_index("ix_campaigns_school_id", "campaigns", ["school_id"])
    op.create_index("ix_campaigns_campaignable", "campaigns", ["campaignable_type", "campaignable_id"])

    op.create_table(
        "contributors",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("uq_contributors_email_lower", "contributors", [sa.text("lower(email)")], unique=True)

    op.create_table(
        "contributions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("campaign_id", sa.Uuid, sa.ForeignKey("campaigns.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("amount_cents", sa.Integer, nullable=False),
        sa.Column("contributor_name", sa.String(200), nullable=True),
        sa.Column("contributor_email", sa.String(255), nullable=True),
        sa.Column(
            "contributor_id", sa.Uuid, sa.ForeignKey("contributors.id", ondelete="RESTRICT"), nullable=True
        ),
        *_timestamps(),
        sa.CheckConstraint("amount_cents > 0", name="ck_contributions_amount_positive"),
    )
    op.create_index("ix_contributions_campaign_id", "contributions", ["campaign_id"])
    op.create_index("ix_contributions_contributor_id", "contributions", ["contributor_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("price_cents", sa.Integer, nullable=False),
        *_timestamps(),
        sa.CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),
    )
    op.create_index("uq_products_name_lower", "products", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "terms_of_service",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("body", sa.Text, nullable=False),
        *_timestamps(),
        sa.CheckConstraint("id = 1", name="ck_terms_of_service_singleton"),
    )


def downgrade() -> None:
    op.drop_table("terms_of_service")
    op.drop_table("products")
    op.drop_table("contributions")
    op.drop_table("contributors")
    op.drop_table("campaigns")
    op.drop_table("teachers")
    op.drop_table("schools")
    op.drop_table("districts")
    op.drop_table("states")
    op.drop_table("users")
