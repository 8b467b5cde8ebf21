"""initial schema

Revision ID: 0001_initial_schema
Revises: None
Create Date: 2026-10-19

Users, owners, vehicles, plate numbers and the ownership ledger, with the
partial unique indexes that allow one IN_USE plate and one open ownership
record per vehicle.
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


ROLE_NAME    = sa.Enum("ADMIN", "OWNER", name="rolename")
USER_STATUS  = sa.Enum("PENDING", "ACTIVE", "DISABLED", name="userstatus")
PLATE_STATUS = sa.Enum("AVAILABLE", "IN_USE", "TRANSFERRED_OUT", "DAMAGED", "RETIRED", name="platestatus")

IN_USE_ONLY = sa.text("status = 'IN_USE'")
OPEN_ONLY   = sa.text('"endDate" IS NULL')


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("firstName", sa.String(100), nullable=False),
        sa.Column("lastName", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phoneNumber", sa.String(20), nullable=False),
        sa.Column("nationalId", sa.String(16), nullable=False),
        sa.Column("role", ROLE_NAME, nullable=False),
        sa.Column("status", USER_STATUS, nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("isActive", sa.Boolean(), nullable=False),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("phoneNumber"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_nationalId", "users", ["nationalId"], unique=True)

    op.create_table(
        "owners",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("userId", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("isActive", sa.Boolean(), nullable=False),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("userId"),
    )
    op.create_index("ix_owners_id", "owners", ["id"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("chassisNumber", sa.String(50), nullable=False),
        sa.Column("modelName", sa.String(100), nullable=False),
        sa.Column("manufacturerCompany", sa.String(100), nullable=True),
        sa.Column("manufacturedYear", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(15, 2), nullable=False),
        sa.Column("isActive", sa.Boolean(), nullable=False),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_vehicles_id", "vehicles", ["id"])
    op.create_index("ix_vehicles_chassisNumber", "vehicles", ["chassisNumber"], unique=True)

    op.create_table(
        "plate_numbers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("plateNumber", sa.String(20), nullable=False),
        sa.Column("ownerId", sa.Integer(), sa.ForeignKey("owners.id"), nullable=False),
        sa.Column("vehicleId", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("status", PLATE_STATUS, nullable=False),
        sa.Column("issuedDate", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_plate_numbers_id", "plate_numbers", ["id"])
    op.create_index("ix_plate_numbers_plateNumber", "plate_numbers", ["plateNumber"], unique=True)
    op.create_index("ix_plate_numbers_ownerId", "plate_numbers", ["ownerId"])
    op.create_index("ix_plate_numbers_vehicleId", "plate_numbers", ["vehicleId"])
    op.create_index("ix_plate_numbers_status", "plate_numbers", ["status"])
    op.create_index(
        "uq_plate_numbers_vehicle_in_use", "plate_numbers", ["vehicleId"], unique=True,
        postgresql_where=IN_USE_ONLY, sqlite_where=IN_USE_ONLY,
    )

    op.create_table(
        "ownerships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vehicleId", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("ownerId", sa.Integer(), sa.ForeignKey("owners.id"), nullable=False),
        sa.Column("startDate", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("endDate", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("transferAmount", sa.Numeric(15, 2), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_ownerships_id", "ownerships", ["id"])
    op.create_index("ix_ownerships_vehicleId", "ownerships", ["vehicleId"])
    op.create_index("ix_ownerships_ownerId", "ownerships", ["ownerId"])
    op.create_index(
        "uq_ownerships_vehicle_open", "ownerships", ["vehicleId"], unique=True,
        postgresql_where=OPEN_ONLY, sqlite_where=OPEN_ONLY,
    )


def downgrade() -> None:
    op.drop_table("ownerships")
    op.drop_table("plate_numbers")
    op.drop_table("vehicles")
    op.drop_table("owners")
    op.drop_table("users")
    for enum in (PLATE_STATUS, USER_STATUS, ROLE_NAME):
        enum.drop(op.get_bind(), checkfirst=True)
