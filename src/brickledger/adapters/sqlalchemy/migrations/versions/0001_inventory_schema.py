"""Catalog, cross-reference and inventory tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "catalog_part",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("shape_key", sa.String(), nullable=False),
        sa.Column("name_generic", sa.String(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("is_printed", sa.Boolean(), nullable=False),
        sa.Column("is_minifig_part", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_catalog_part"),
        sa.UniqueConstraint("shape_key", name="uq_catalog_part_shape_key"),
    )
    op.create_table(
        "catalog_color",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("generic_name", sa.String(), nullable=False),
        sa.Column("rgb_hex", sa.String(length=16), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_catalog_color"),
        sa.UniqueConstraint("generic_name", name="uq_catalog_color_generic_name"),
    )
    op.create_table(
        "catalog_part_source_id",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("part_id", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(length=16), nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["part_id"],
            ["catalog_part.id"],
            name="fk_catalog_part_source_id_part_id_catalog_part",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_catalog_part_source_id"),
        sa.UniqueConstraint(
            "source", "source_id", name="uq_catalog_part_source_id_source_source_id"
        ),
    )
    op.create_table(
        "catalog_color_source_id",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("color_id", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(length=16), nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["color_id"],
            ["catalog_color.id"],
            name="fk_catalog_color_source_id_color_id_catalog_color",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_catalog_color_source_id"),
        sa.UniqueConstraint(
            "source", "source_id", name="uq_catalog_color_source_id_source_source_id"
        ),
    )
    op.create_table(
        "part_crossref",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("canonical_part_id", sa.String(), nullable=False),
        sa.Column("rebrickable_part_id", sa.String(), nullable=True),
        sa.Column("bricklink_part_id", sa.String(), nullable=True),
        sa.Column("brickowl_part_id", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_part_crossref"),
        sa.UniqueConstraint("canonical_part_id", name="uq_part_crossref_canonical_part_id"),
    )
    op.create_index(
        "ix_part_crossref_bricklink_part_id", "part_crossref", ["bricklink_part_id"]
    )
    op.create_table(
        "color_crossref",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("canonical_color_id", sa.Integer(), nullable=False),
        sa.Column("rebrickable_color_id", sa.String(), nullable=True),
        sa.Column("bricklink_color_id", sa.String(), nullable=True),
        sa.Column("brickowl_color_id", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_color_crossref"),
        sa.UniqueConstraint("canonical_color_id", name="uq_color_crossref_canonical_color_id"),
    )
    op.create_index(
        "ix_color_crossref_bricklink_color_id", "color_crossref", ["bricklink_color_id"]
    )
    op.create_table(
        "import_batch",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("file_name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("lot_count", sa.Integer(), nullable=False),
        sa.Column("piece_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_import_batch"),
    )
    op.create_table(
        "inventory_lot",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("canonical_part_id", sa.String(), nullable=False),
        sa.Column("canonical_color_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("condition", sa.String(length=1), nullable=False, server_default="U"),
        sa.Column("source", sa.String(), nullable=True),
        sa.Column("import_batch_id", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["import_batch_id"],
            ["import_batch.id"],
            name="fk_inventory_lot_import_batch_id_import_batch",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_inventory_lot"),
        sa.UniqueConstraint(
            "canonical_part_id",
            "canonical_color_id",
            "condition",
            name="uq_inventory_lot_canonical_part_id_canonical_color_id_condition",
        ),
    )


def downgrade() -> None:
    op.drop_table("inventory_lot")
    op.drop_table("import_batch")
    op.drop_index("ix_color_crossref_bricklink_color_id", table_name="color_crossref")
    op.drop_table("color_crossref")
    op.drop_index("ix_part_crossref_bricklink_part_id", table_name="part_crossref")
    op.drop_table("part_crossref")
    op.drop_table("catalog_color_source_id")
    op.drop_table("catalog_part_source_id")
    op.drop_table("catalog_color")
    op.drop_table("catalog_part")
