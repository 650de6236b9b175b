from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, IDMixin, TimestampMixin

if TYPE_CHECKING:
    from storefront.models.address import Address
    from storefront.models.order import Order


class User(IDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)

    addresses: Mapped[list["Address"]] = relationship(
        "Address",
        back_populates="user",
        order_by="Address.id",
    )
    orders: Mapped[list["Order"]] = relationship(
        "Order",
        back_populates="user",
    )

    def __repr__(self) -> str:
        return f"<User id={self.id!r} email={self.email!r}>"
