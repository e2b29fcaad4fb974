"""Categorization and balance-reconciliation engine for SMS-driven ledgers."""

__version__ = "0.1.0"
