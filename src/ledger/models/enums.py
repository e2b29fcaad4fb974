"""Enumerations shared by models, schemas and services."""
import enum


class TransactionType(str, enum.Enum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class CategoryType(str, enum.Enum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class AccountType(str, enum.Enum):
    CASH = "CASH"
    BANK = "BANK"
    UPI = "UPI"
    CREDIT_CARD = "CREDIT_CARD"
    WALLET = "WALLET"
    OTHER = "OTHER"


class Period(str, enum.Enum):
    """Budget periods and recurring frequencies."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"
