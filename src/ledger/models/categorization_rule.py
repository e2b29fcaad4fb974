"""User-defined text -> category rules.

If a transaction's UPI id, merchant name or sender contains ``match_text``
(case-insensitive), the transaction is assigned ``category_id``.
"""
from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel


class CategorizationRule(BaseModel):
    """Substring rule mapping text to a category."""

    __tablename__ = "categorization_rules"

    match_text: Mapped[str] = mapped_column(String(255), nullable=False)
    # Normalized (trimmed, lowercased) copy used for uniqueness and matching.
    match_key: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=100)

    __table_args__ = (UniqueConstraint("match_key", name="uq_rule_match_key"),)

    def __repr__(self) -> str:
        return (
            f"<CategorizationRule(id={self.id}, match_text={self.match_text}, "
            f"category_id={self.category_id}, priority={self.priority})>"
        )
