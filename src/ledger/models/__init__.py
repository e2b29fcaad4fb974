"""Database models."""
from ledger.models.account import Account
from ledger.models.budget import Budget
from ledger.models.categorization_rule import CategorizationRule
from ledger.models.category import Category
from ledger.models.enums import AccountType, CategoryType, Period, TransactionType
from ledger.models.ledger_entry import LedgerEntry
from ledger.models.recurring_expense import RecurringExpense
from ledger.models.savings_goal import SavingsGoal

__all__ = [
    "Account",
    "AccountType",
    "Budget",
    "CategorizationRule",
    "Category",
    "CategoryType",
    "LedgerEntry",
    "Period",
    "RecurringExpense",
    "SavingsGoal",
    "TransactionType",
]
