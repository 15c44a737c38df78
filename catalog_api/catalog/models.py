"""SQLAlchemy models for the product catalog.

Defines the taxonomy tree (families, categories, subcategories), the global
option/feature catalog, products with their variants, link tables and user
profiles.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_api.infrastructure.database import Base

# Prices are stored with two decimals and handled as floats in Python.
Price = Numeric(10, 2, asdecimal=False)


# ============================================================================
# Taxonomy
# ============================================================================


class Family(Base):
    """Top level of the taxonomy tree."""

    __tablename__ = "families"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    categories: Mapped[list["Category"]] = relationship(
        "Category",
        back_populates="family",
        order_by="Category.name",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Family(id={self.id}, name={self.name})>"


class Category(Base):
    """Second level of the taxonomy tree."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    family_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("families.id"),
        nullable=False,
        index=True,
    )

    family: Mapped["Family"] = relationship("Family", back_populates="categories")
    subcategories: Mapped[list["Subcategory"]] = relationship(
        "Subcategory",
        back_populates="category",
        order_by="Subcategory.name",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, name={self.name}, family_id={self.family_id})>"


class Subcategory(Base):
    """Leaf level of the taxonomy tree; products hang from here."""

    __tablename__ = "subcategories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )

    category: Mapped["Category"] = relationship("Category", back_populates="subcategories")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Subcategory(id={self.id}, name={self.name}, category_id={self.category_id})>"


# ============================================================================
# Options & Features
# ============================================================================


class Option(Base):
    """Catalog-wide axis of variation (e.g. "Color")."""

    __tablename__ = "options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)

    features: Mapped[list["Feature"]] = relationship(
        "Feature",
        back_populates="option",
        order_by="Feature.value",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Option(id={self.id}, name={self.name})>"


class Feature(Base):
    """Concrete value of an option (e.g. "Rojo")."""

    __tablename__ = "features"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[str] = mapped_column(String(50), nullable=False)
    option_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("options.id"),
        nullable=False,
        index=True,
    )

    option: Mapped["Option"] = relationship("Option", back_populates="features")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Feature(id={self.id}, value={self.value}, option_id={self.option_id})>"


# ============================================================================
# Products & Variants
# ============================================================================


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Numeric product identifier (also the slug suffix).
        name: Display name.
        sku: Stock keeping unit, upper-case alphanumerics, ``-`` and ``_``.
        price: Base price; variants without their own price inherit it.
        detail: Optional long description.
        image_path: Optional image URL.
        subcategory_id: Owning subcategory.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    sku: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[float] = mapped_column(Price, nullable=False)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_path: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    subcategory_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subcategories.id"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    subcategory: Mapped["Subcategory"] = relationship("Subcategory")
    variants: Mapped[list["Variant"]] = relationship(
        "Variant",
        back_populates="product",
        order_by="Variant.id",
    )
    options: Mapped[list["Option"]] = relationship(
        "Option",
        secondary="option_products",
        order_by="Option.name",
        viewonly=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, sku={self.sku}, name={self.name[:30]})>"


class OptionProduct(Base):
    """Link between a product and one of its selected options."""

    __tablename__ = "option_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id"),
        nullable=False,
        index=True,
    )
    option_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("options.id"),
        nullable=False,
        index=True,
    )


class Variant(Base):
    """A purchasable combination of one feature per selected option."""

    __tablename__ = "variants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id"),
        nullable=False,
        index=True,
    )
    price: Mapped[float | None] = mapped_column(Price, nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product: Mapped["Product"] = relationship("Product", back_populates="variants")
    features: Mapped[list["Feature"]] = relationship(
        "Feature",
        secondary="variant_features",
        order_by="Feature.option_id",
        viewonly=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Variant(id={self.id}, product_id={self.product_id}, stock={self.stock})>"


class VariantFeature(Base):
    """Link between a variant and one feature of its combination."""

    __tablename__ = "variant_features"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    variant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("variants.id"),
        nullable=False,
        index=True,
    )
    feature_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("features.id"),
        nullable=False,
        index=True,
    )


# ============================================================================
# Users
# ============================================================================


class Profile(Base):
    """Profile row, one-to-one with an auth service identity."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Profile(id={self.id}, full_name={self.full_name})>"
