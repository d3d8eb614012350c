"""SQLAlchemy models for the catalog feature."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Numeric, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_pager.core.database import Base, IntegerPKMixin, TimestampedBase

# Many-to-many association table for catalog items <-> tags
catalog_item_tags = Table(
    "catalog_item_tags",
    Base.metadata,
    Column(
        "item_id",
        ForeignKey("catalog_items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Family(Base, IntegerPKMixin):
    """Group of icon sets drawn in a common design language."""

    __tablename__ = "families"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Family(id={self.id}, name={self.name!r})>"


class IconSet(Base, IntegerPKMixin):
    """Set of items published together; belongs to at most one family."""

    __tablename__ = "icon_sets"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    family_id: Mapped[int | None] = mapped_column(
        ForeignKey("families.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    family: Mapped[Family | None] = relationship(lazy="raise")

    def __repr__(self) -> str:
        return f"<IconSet(id={self.id}, name={self.name!r}, family_id={self.family_id})>"


class Style(Base, IntegerPKMixin):
    """Drawing style (outline, solid, duotone, ...)."""

    __tablename__ = "styles"

    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Tag(Base, IntegerPKMixin):
    """Free-form label attached to catalog items."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class CatalogItem(TimestampedBase):
    """A purchasable catalog item (an icon).

    Read-only for pagination. ``created_at`` and ``popularity`` are the
    sortable columns; each has a composite index with ``id`` matching the
    keyset ORDER BY.
    """

    __tablename__ = "catalog_items"
    __table_args__ = (
        Index("ix_catalog_items_created_at_id", "created_at", "id"),
        Index("ix_catalog_items_popularity_id", "popularity", "id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Price; zero means free",
    )
    popularity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Download/sales counter used by the bestseller ordering",
    )
    set_id: Mapped[int | None] = mapped_column(
        ForeignKey("icon_sets.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    style_id: Mapped[int | None] = mapped_column(
        ForeignKey("styles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    icon_set: Mapped[IconSet | None] = relationship(lazy="raise")
    tags: Mapped[list[Tag]] = relationship(secondary=catalog_item_tags, lazy="raise")

    def __repr__(self) -> str:
        return f"<CatalogItem(id={self.id}, name={self.name!r})>"


__all__ = [
    "CatalogItem",
    "Family",
    "IconSet",
    "Style",
    "Tag",
    "catalog_item_tags",
]
