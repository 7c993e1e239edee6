"""Create the listings table.

The real-time feed may already own a ``listings`` table with the same six
columns; in that case it is adopted as is and only missing indexes are added.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import context, op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

INDEXES = {
    "ix_listings_name_intent": ["name", "intent"],
    "ix_listings_updated": ["updated"],
}


def _schema() -> str | None:
    return context.config.attributes.get("schema")


def upgrade() -> None:
    schema = _schema()
    bind = op.get_bind()
    if schema and bind.dialect.name == "postgresql":
        op.execute(sa.schema.CreateSchema(schema, if_not_exists=True))

    inspector = sa.inspect(bind)
    if inspector.has_table("listings", schema=schema):
        existing = {index["name"] for index in inspector.get_indexes("listings", schema=schema)}
    else:
        existing = set()
        op.create_table(
            "listings",
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("sku", sa.String(), nullable=False),
            sa.Column("currencies", sa.Text(), nullable=False),
            sa.Column(
                "intent",
                sa.Enum(
                    "buy",
                    "sell",
                    name="listing_intent",
                    native_enum=False,
                    create_constraint=True,
                    length=4,
                ),
                nullable=False,
            ),
            sa.Column("updated", sa.BigInteger(), nullable=False),
            sa.Column("steamid", sa.String(), nullable=False),
            sa.UniqueConstraint("name", "sku", "intent", "steamid", name="uq_listings_key"),
            schema=schema,
        )

    for index_name, columns in INDEXES.items():
        if index_name not in existing:
            op.create_index(index_name, "listings", columns, schema=schema)


def downgrade() -> None:
    schema = _schema()
    for index_name in reversed(INDEXES):
        op.drop_index(index_name, table_name="listings", schema=schema)
    op.drop_table("listings", schema=schema)
