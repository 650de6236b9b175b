from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, IDMixin, TimestampMixin

if TYPE_CHECKING:
    from storefront.models.address import Address
    from storefront.models.user import User
    from storefront.models.variation import SizeVariation


class Order(IDMixin, TimestampMixin, Base):
    __tablename__ = "orders"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
    )
    shipping_address_id: Mapped[int] = mapped_column(
        ForeignKey("addresses.id"),
        nullable=False,
    )
    billing_address_id: Mapped[int] = mapped_column(
        ForeignKey("addresses.id"),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="orders")
    shipping_address: Mapped["Address"] = relationship(
        "Address",
        foreign_keys=[shipping_address_id],
    )
    billing_address: Mapped["Address"] = relationship(
        "Address",
        foreign_keys=[billing_address_id],
    )
    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id!r} user_id={self.user_id!r}>"


class OrderItem(IDMixin, TimestampMixin, Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
        CheckConstraint(
            "discount_rate >= 0 AND discount_rate <= 100",
            name="ck_order_items_discount_rate_range",
        ),
    )

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id"),
        nullable=False,
    )
    size_variation_id: Mapped[int] = mapped_column(
        ForeignKey("size_variations.id"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    order: Mapped["Order"] = relationship("Order", back_populates="items")
    size_variation: Mapped["SizeVariation"] = relationship("SizeVariation")

    def __repr__(self) -> str:
        return (
            f"<OrderItem id={self.id!r} order_id={self.order_id!r} "
            f"quantity={self.quantity!r}>"
        )
