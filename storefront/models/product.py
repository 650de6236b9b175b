from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, IDMixin, TimestampMixin

if TYPE_CHECKING:
    from storefront.models.category import Category
    from storefront.models.variation import ColorVariation


class Product(IDMixin, TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    name_with_slug: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    made_country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    category: Mapped["Category"] = relationship(
        "Category",
        back_populates="products",
    )
    color_variations: Mapped[list["ColorVariation"]] = relationship(
        "ColorVariation",
        back_populates="product",
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id!r} code={self.code!r}>"
