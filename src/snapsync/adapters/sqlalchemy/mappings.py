"""SQLAlchemy table metadata for reconciled listings."""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    Dialect,
    Enum,
    Index,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

from snapsync.domain.model import Currencies, Intent


class CurrenciesType(TypeDecorator[Currencies]):
    """Stores ``Currencies`` in their canonical JSON text form."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Currencies | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return value.to_json()

    def process_result_value(self, value: str | None, dialect: Dialect) -> Currencies | None:
        _ = dialect
        if value is None:
            return None
        return Currencies.from_json(value)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

LISTING_KEY_COLUMNS = ("name", "sku", "intent", "steamid")

listings_table = Table(
    "listings",
    metadata,
    Column("name", String, nullable=False),
    Column("sku", String, nullable=False),
    Column("currencies", CurrenciesType, nullable=False),
    Column(
        "intent",
        Enum(
            Intent,
            name="listing_intent",
            native_enum=False,
            create_constraint=True,
            length=4,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    ),
    Column("updated", BigInteger, nullable=False),
    Column("steamid", String, nullable=False),
    UniqueConstraint(*LISTING_KEY_COLUMNS, name="uq_listings_key"),
    Index("ix_listings_name_intent", "name", "intent"),
    Index("ix_listings_updated", "updated"),
)
