"""Category model for expense and income classification."""
from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel
from ledger.models.enums import CategoryType


class Category(BaseModel):
    """Spending or income category. Color and icon are opaque display codes."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[CategoryType] = mapped_column(
        Enum(CategoryType, native_enum=False, length=16), nullable=False, index=True
    )
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#9CA3AF")
    icon: Mapped[str] = mapped_column(String(64), nullable=False, default="MoreHoriz")
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, type={self.type})>"
