"""create_stable_tables

Revision ID: 4b1d7e2a9c30
Revises:
Create Date: 2026-03-02 10:14:08.412593

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b1d7e2a9c30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

PROFESSION_KINDS = (
    "coach",
    "veterinarian",
    "farrier",
    "osteopath",
    "dentist",
    "saddle_fitter",
    "physiotherapist",
    "shiatsu",
    "other",
)
HORSE_SEXES = ("mare", "gelding", "stallion", "unknown")
TRANSPORT_MODES = ("unknown", "van", "truck", "on_foot", "other")


def _in(column: str, values: Sequence[str]) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
    )


def upgrade() -> None:
    """Create profiles, addresses, professionals, horses, interventions and movements."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False, server_default=""),
        sa.Column("display_name", sa.String(length=120), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.ForeignKeyConstraint(["id"], ["auth.users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="profiles_role_check"),
    )

    op.create_table(
        "addresses",
        _uuid_pk(),
        sa.Column("label", sa.String(length=120), nullable=True),
        sa.Column("line1", sa.String(length=200), nullable=False),
        sa.Column("line2", sa.String(length=200), nullable=True),
        sa.Column("postal_code", sa.String(length=20), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("country", sa.String(length=60), nullable=False, server_default="FR"),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column(
            "created_by", sa.UUID(), server_default=sa.text("auth.uid()"), nullable=True
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "addresses_owner_normalized_key",
        "addresses",
        [
            "created_by",
            sa.text("lower(btrim(line1))"),
            sa.text("lower(btrim(coalesce(line2, '')))"),
            sa.text("lower(btrim(postal_code))"),
            sa.text("lower(btrim(city))"),
            sa.text("lower(btrim(country))"),
        ],
        unique=True,
    )

    op.create_table(
        "professionals",
        _uuid_pk(),
        sa.Column("display_name", sa.String(length=120), nullable=False),
        sa.Column("company_name", sa.String(length=120), nullable=True),
        sa.Column("kind", sa.String(length=30), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column(
            "phone_digits",
            sa.String(length=40),
            sa.Computed("regexp_replace(coalesce(phone, ''), '\\D', '', 'g')", persisted=True),
        ),
        sa.Column("website", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("address_id", sa.UUID(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_by", sa.UUID(), server_default=sa.text("auth.uid()"), nullable=True
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["address_id"], ["addresses.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(_in("kind", PROFESSION_KINDS), name="professionals_kind_check"),
        sa.CheckConstraint("btrim(display_name) <> ''", name="professionals_display_name_check"),
    )
    op.create_index(
        "professionals_kind_email_key",
        "professionals",
        ["kind", sa.text("lower(email)")],
        unique=True,
        postgresql_where=sa.text("email IS NOT NULL AND email <> ''"),
    )
    op.create_index(
        "professionals_kind_phone_key",
        "professionals",
        ["kind", "phone_digits"],
        unique=True,
        postgresql_where=sa.text("phone_digits <> ''"),
    )
    op.create_index("professionals_display_name_idx", "professionals", ["display_name"])

    op.create_table(
        "horses",
        _uuid_pk(),
        sa.Column(
            "owner_id", sa.UUID(), server_default=sa.text("auth.uid()"), nullable=False
        ),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("birthdate", sa.Date(), nullable=True),
        sa.Column("sex", sa.String(length=20), nullable=True),
        sa.Column("sire_number", sa.String(length=40), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["owner_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(_in("sex", HORSE_SEXES), name="horses_sex_check"),
    )
    op.create_index("horses_owner_created_idx", "horses", ["owner_id", "created_at"])

    op.create_table(
        "interventions",
        _uuid_pk(),
        sa.Column("horse_id", sa.UUID(), nullable=False),
        sa.Column("professional_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_by", sa.UUID(), server_default=sa.text("auth.uid()"), nullable=True
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["horse_id"], ["horses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["professional_id"], ["professionals.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "horse_movements",
        _uuid_pk(),
        sa.Column("horse_id", sa.UUID(), nullable=False),
        sa.Column("from_address_id", sa.UUID(), nullable=True),
        sa.Column("to_address_id", sa.UUID(), nullable=False),
        sa.Column("professional_id", sa.UUID(), nullable=True),
        sa.Column("intervention_id", sa.UUID(), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("return_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("transport", sa.String(length=20), nullable=False, server_default="unknown"),
        sa.Column("manual", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_by", sa.UUID(), server_default=sa.text("auth.uid()"), nullable=True
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["horse_id"], ["horses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["from_address_id"], ["addresses.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["to_address_id"], ["addresses.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["professional_id"], ["professionals.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["intervention_id"], ["interventions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(_in("transport", TRANSPORT_MODES), name="horse_movements_transport_check"),
    )
    op.create_index(
        "horse_movements_horse_start_idx",
        "horse_movements",
        ["horse_id", sa.text("start_at DESC NULLS LAST"), sa.text("created_at DESC")],
    )

    op.create_table(
        "horse_professionals",
        sa.Column("horse_id", sa.UUID(), nullable=False),
        sa.Column("professional_id", sa.UUID(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["horse_id"], ["horses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["professional_id"], ["professionals.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("horse_id", "professional_id"),
    )


def downgrade() -> None:
    """Drop the stable tables."""
    op.drop_table("horse_professionals")
    op.drop_index("horse_movements_horse_start_idx", table_name="horse_movements")
    op.drop_table("horse_movements")
    op.drop_table("interventions")
    op.drop_index("horses_owner_created_idx", table_name="horses")
    op.drop_table("horses")
    op.drop_index("professionals_display_name_idx", table_name="professionals")
    op.drop_index("professionals_kind_phone_key", table_name="professionals")
    op.drop_index("professionals_kind_email_key", table_name="professionals")
    op.drop_table("professionals")
    op.drop_index("addresses_owner_normalized_key", table_name="addresses")
    op.drop_table("addresses")
    op.drop_table("profiles")
