"""Built-in categories seeded on first run."""

from __future__ import annotations

from typing import Final

from ledger.models.enums import CategoryType

# (id, name, icon, color)
EXPENSE_CATEGORIES: Final[tuple[tuple[str, str, str, str], ...]] = (
    ("food", "Food & Dining", "Restaurant", "#FF6B6B"),
    ("transportation", "Transport", "DirectionsCar", "#4ECDC4"),
    ("shopping", "Shopping", "ShoppingBag", "#FFE66D"),
    ("entertainment", "Entertainment", "Movie", "#95E1D3"),
    ("bills", "Bills & Utilities", "Receipt", "#F38181"),
    ("healthcare", "Healthcare", "LocalHospital", "#AA96DA"),
    ("education", "Education", "School", "#74B9FF"),
    ("groceries", "Groceries", "ShoppingCart", "#55A3FF"),
    ("subscriptions", "Subscriptions", "Subscriptions", "#A29BFE"),
    ("travel", "Travel", "Flight", "#FD79A8"),
    ("goals", "Savings Goals", "Savings", "#22C55E"),
    ("other_expense", "Other", "MoreHoriz", "#9CA3AF"),
)

INCOME_CATEGORIES: Final[tuple[tuple[str, str, str, str], ...]] = (
    ("salary", "Salary", "Work", "#22C55E"),
    ("freelance", "Freelance", "Computer", "#14B8A6"),
    ("investment", "Investment", "TrendingUp", "#3B82F6"),
    ("gift", "Gift", "CardGiftcard", "#8B5CF6"),
    ("refund", "Refund", "Replay", "#F59E0B"),
    ("adjustment", "Adjustment", "SwapVert", "#6B7280"),
    ("other_income", "Other", "MoreHoriz", "#9CA3AF"),
)

GOALS_CATEGORY_ID: Final[str] = "goals"

# Balance corrections are booked here and are not real income.
ADJUSTMENT_CATEGORY_ID: Final[str] = "adjustment"


def default_categories() -> list[dict]:
    """Column values for every built-in category."""
    rows = []
    for type_, table in (
        (CategoryType.EXPENSE, EXPENSE_CATEGORIES),
        (CategoryType.INCOME, INCOME_CATEGORIES),
    ):
        for id_, name, icon, color in table:
            rows.append(
                {
                    "id": id_,
                    "name": name,
                    "icon": icon,
                    "color": color,
                    "type": type_,
                    "is_default": True,
                }
            )
    return rows
