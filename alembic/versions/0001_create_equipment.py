"""create equipment table"""

from alembic import op
import sqlalchemy as sa


revision = "0001_create_equipment"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "equipment",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("tag_number", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("type", sa.String(length=100), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="Operating"),
        sa.Column("capacity", sa.Float, nullable=True),
        sa.Column("unit", sa.String(length=50), nullable=True),
        sa.Column("install_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_equipment_tag_number", "equipment", ["tag_number"], unique=True)
    op.create_index("ix_equipment_type", "equipment", ["type"])
    op.create_index("ix_equipment_status", "equipment", ["status"])


def downgrade() -> None:
    op.drop_index("ix_equipment_status", table_name="equipment")
    op.drop_index("ix_equipment_type", table_name="equipment")
    op.drop_index("ix_equipment_tag_number", table_name="equipment")
    op.drop_table("equipment")
