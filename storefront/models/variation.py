from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, IDMixin, TimestampMixin

if TYPE_CHECKING:
    from storefront.models.color import Color
    from storefront.models.product import Product
    from storefront.models.size import Size


class ColorVariation(IDMixin, TimestampMixin, Base):
    __tablename__ = "color_variations"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"),
        nullable=False,
    )
    color_id: Mapped[int] = mapped_column(
        ForeignKey("colors.id"),
        nullable=False,
    )

    product: Mapped["Product"] = relationship("Product", back_populates="color_variations")
    color: Mapped["Color"] = relationship("Color")
    images: Mapped[list["ColorVariationImage"]] = relationship(
        "ColorVariationImage",
        back_populates="color_variation",
    )
    size_variations: Mapped[list["SizeVariation"]] = relationship(
        "SizeVariation",
        back_populates="color_variation",
    )

    def __repr__(self) -> str:
        return (
            f"<ColorVariation id={self.id!r} product_id={self.product_id!r} "
            f"color_id={self.color_id!r}>"
        )


class ColorVariationImage(IDMixin, TimestampMixin, Base):
    __tablename__ = "color_variation_images"

    color_variation_id: Mapped[int] = mapped_column(
        ForeignKey("color_variations.id"),
        nullable=False,
    )
    image: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    color_variation: Mapped["ColorVariation"] = relationship(
        "ColorVariation",
        back_populates="images",
    )

    def __repr__(self) -> str:
        return (
            f"<ColorVariationImage id={self.id!r} "
            f"color_variation_id={self.color_variation_id!r} bytes={len(self.image or b'')}>"
        )


class SizeVariation(IDMixin, TimestampMixin, Base):
    __tablename__ = "size_variations"
    __table_args__ = (
        CheckConstraint(
            "available_quantity >= 0",
            name="ck_size_variations_available_quantity_non_negative",
        ),
    )

    color_variation_id: Mapped[int] = mapped_column(
        ForeignKey("color_variations.id"),
        nullable=False,
    )
    size_id: Mapped[int] = mapped_column(
        ForeignKey("sizes.id"),
        nullable=False,
    )
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    color_variation: Mapped["ColorVariation"] = relationship(
        "ColorVariation",
        back_populates="size_variations",
    )
    size: Mapped["Size"] = relationship("Size")

    def __repr__(self) -> str:
        return (
            f"<SizeVariation id={self.id!r} color_variation_id={self.color_variation_id!r} "
            f"size_id={self.size_id!r}>"
        )
