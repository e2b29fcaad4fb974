"""User-defined categorization rules.

A RuleStore is an immutable, ordered snapshot of the user's rules. Rules are
ordered by priority (lower first), then creation time, then id, and the first
rule whose text is contained in the candidate wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable


def normalize_match_text(text: str | None) -> str:
    """Case-insensitive match key: trimmed and lowercased."""
    return (text or "").strip().lower()


@dataclass(frozen=True)
class Rule:
    """Read-only view of a CategorizationRule row."""

    id: str
    match_text: str
    category_id: str
    priority: int = 100
    created_at: datetime | None = None

    @property
    def match_key(self) -> str:
        return normalize_match_text(self.match_text)

    def matches(self, text: str) -> bool:
        key = self.match_key
        return bool(key) and key in normalize_match_text(text)


def _sort_key(rule: Rule) -> tuple:
    created = rule.created_at.timestamp() if rule.created_at else 0.0
    return (rule.priority, created, rule.id)


class RuleStore:
    """Ordered collection of text -> category rules."""

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: tuple[Rule, ...] = tuple(sorted(rules, key=_sort_key))

    @classmethod
    def from_rows(cls, rows: Iterable[Any]) -> RuleStore:
        """Build a store from ORM rows (or anything with the same attributes)."""
        return cls(
            Rule(
                id=row.id,
                match_text=row.match_text,
                category_id=row.category_id,
                priority=row.priority,
                created_at=row.created_at,
            )
            for row in rows
        )

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def find_rule_for_text(self, text: str | None) -> Rule | None:
        """Return the first rule whose match text is contained in ``text``."""
        if not text or not text.strip():
            return None
        for rule in self._rules:
            if rule.matches(text):
                return rule
        return None
