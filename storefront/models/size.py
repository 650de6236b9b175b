from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, IDMixin, TimestampMixin


class Size(IDMixin, TimestampMixin, Base):
    __tablename__ = "sizes"

    name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        return f"<Size id={self.id!r} name={self.name!r} code={self.code!r}>"
