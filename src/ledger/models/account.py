"""Account model representing where money is held (cash, bank, UPI, cards)."""
from sqlalchemy import BigInteger, Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel
from ledger.models.enums import AccountType


class Account(BaseModel):
    """Payment account.

    ``balance`` is maintained incrementally by the reconciler and always equals
    ``opening_balance`` plus the signed effects of the ledger entries that
    reference this account. Both are stored in minor units.
    """

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[AccountType] = mapped_column(
        Enum(AccountType, native_enum=False, length=16), nullable=False
    )
    icon: Mapped[str] = mapped_column(String(64), nullable=False, default="AccountBalance")
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#3B82F6")
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    opening_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # SMS linking
    bank_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(8), nullable=True)
    linked_sender_ids: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_linked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def sender_ids(self) -> list[str]:
        if not self.linked_sender_ids:
            return []
        return [s.strip().upper() for s in self.linked_sender_ids.split(",") if s.strip()]

    def match_score(self, sender: str, account_hint: str | None) -> int:
        """Score (0-100) how well an SMS sender / last-four hint fits this account."""
        if not self.is_linked:
            return 0

        score = 0
        normalized_sender = (sender or "").upper().replace("-", "")
        if any(s in normalized_sender for s in self.sender_ids()):
            score += 40
        if self.bank_code and self.bank_code.upper() in normalized_sender:
            score += 30
        if self.account_number and account_hint and self.account_number == account_hint:
            score += 50
        return min(score, 100)

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, name={self.name}, balance={self.balance})>"
