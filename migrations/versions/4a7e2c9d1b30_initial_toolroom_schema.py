"""initial toolroom schema

Revision ID: 4a7e2c9d1b30
Revises:
Create Date: 2026-01-12 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4a7e2c9d1b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Upgrade schema: users, materials, machines, history, menu, permissions, currency."""
    user_role = sa.Enum("admin", "user", name="user_role")
    user_status = sa.Enum("active", "inactive", name="user_status")

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=200), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="user"),
        sa.Column("status", user_status, nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "custom_materials",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("hardness", sa.String(length=50), nullable=True),
        sa.Column("cutting_speed_min", sa.Float(), nullable=False),
        sa.Column("cutting_speed_max", sa.Float(), nullable=False),
        sa.Column("feed_rate_min", sa.Float(), nullable=False),
        sa.Column("feed_rate_max", sa.Float(), nullable=False),
        sa.Column("taylor_n", sa.Float(), nullable=False, server_default=sa.text("0.2")),
        sa.Column("taylor_c", sa.Float(), nullable=False, server_default=sa.text("250")),
        sa.Column("density", sa.Float(), nullable=False, server_default=sa.text("7.85")),
        sa.Column("price_per_kg", sa.Numeric(10, 2), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_custom_materials_id", "custom_materials", ["id"])
    op.create_index("ix_custom_materials_name", "custom_materials", ["name"], unique=True)
    op.create_index("ix_custom_materials_user_id", "custom_materials", ["user_id"])

    op.create_table(
        "material_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("material_key", sa.String(length=50), nullable=False),
        sa.Column("price_per_kg", sa.Numeric(10, 2), nullable=True),
        sa.Column("afk_multiplier", sa.Numeric(6, 3), nullable=True),
        sa.Column("updated_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_material_settings_id", "material_settings", ["id"])
    op.create_index("ix_material_settings_material_key", "material_settings", ["material_key"], unique=True)

    op.create_table(
        "material_price_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("material_key", sa.String(length=50), nullable=False),
        sa.Column("change_type", sa.String(length=20), nullable=False, server_default="price"),
        sa.Column("old_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("new_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("old_afk_multiplier", sa.Numeric(6, 3), nullable=True),
        sa.Column("new_afk_multiplier", sa.Numeric(6, 3), nullable=True),
        sa.Column("changed_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("changed_by_name", sa.String(length=200), nullable=True),
        sa.Column("source", sa.String(length=20), nullable=False, server_default="api"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_material_price_history_id", "material_price_history", ["id"])
    op.create_index("ix_material_price_history_material_key", "material_price_history", ["material_key"])
    op.create_index("ix_material_price_history_changed_by", "material_price_history", ["changed_by"])

    op.create_table(
        "machines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("designation", sa.String(length=100), nullable=False),
        sa.Column("brand", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("label", sa.String(length=150), nullable=False),
        sa.Column("factory", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("max_diameter_mm", sa.Float(), nullable=True),
        sa.Column("power_kw", sa.Float(), nullable=True),
        sa.Column("max_rpm", sa.Integer(), nullable=True),
        sa.Column("taper", sa.String(length=30), nullable=True),
        sa.Column("has_live_tooling", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_y_axis", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_c_axis", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("travel_x_mm", sa.Float(), nullable=True),
        sa.Column("travel_y_mm", sa.Float(), nullable=True),
        sa.Column("travel_z_mm", sa.Float(), nullable=True),
        sa.Column("minute_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("ix_machines_id", "machines", ["id"])
    op.create_index("ix_machines_code", "machines", ["code"], unique=True)
    op.create_index("ix_machines_type", "machines", ["type"])

    op.create_table(
        "saved_calculations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("calculation_type", sa.String(length=20), nullable=False),
        sa.Column("material", sa.String(length=150), nullable=False),
        sa.Column("tool", sa.String(length=150), nullable=False),
        sa.Column("parameters", sa.JSON(), nullable=False),
        sa.Column("results", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_saved_calculations_id", "saved_calculations", ["id"])
    op.create_index("ix_saved_calculations_calculation_type", "saved_calculations", ["calculation_type"])
    op.create_index("ix_saved_calculations_user_id", "saved_calculations", ["user_id"])
    op.create_index("ix_saved_calculations_created_at", "saved_calculations", ["created_at"])

    op.create_table(
        "menu_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(length=50), nullable=False, unique=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("icon", sa.String(length=50), nullable=False, server_default="Folder"),
        sa.Column("color", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("bg_color", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("text_color", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("border_color", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("ix_menu_categories_id", "menu_categories", ["id"])

    op.create_table(
        "menu_category_modules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("menu_categories.id"), nullable=False),
        sa.Column("module_key", sa.String(length=50), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("category_id", "module_key", name="uq_menu_category_module"),
    )
    op.create_index("ix_menu_category_modules_id", "menu_category_modules", ["id"])
    op.create_index("ix_menu_category_modules_category_id", "menu_category_modules", ["category_id"])

    op.create_table(
        "admin_panel_permissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("panel_key", sa.String(length=50), nullable=False),
        sa.Column("can_view", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("can_edit", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "panel_key", name="uq_admin_panel_permission"),
    )
    op.create_index("ix_admin_panel_permissions_id", "admin_panel_permissions", ["id"])
    op.create_index("ix_admin_panel_permissions_user_id", "admin_panel_permissions", ["user_id"])

    op.create_table(
        "currency_rates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("rate_type", sa.String(length=10), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("is_forecast", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("source", sa.String(length=30), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("year", "month", "rate_type", "is_forecast", name="uq_currency_rate_period"),
    )
    op.create_index("ix_currency_rates_id", "currency_rates", ["id"])
    op.create_index("ix_currency_rates_year", "currency_rates", ["year"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("currency_rates")
    op.drop_table("admin_panel_permissions")
    op.drop_table("menu_category_modules")
    op.drop_table("menu_categories")
    op.drop_table("saved_calculations")
    op.drop_table("machines")
    op.drop_table("material_price_history")
    op.drop_table("material_settings")
    op.drop_table("custom_materials")
    op.drop_table("users")
    sa.Enum(name="user_status").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
