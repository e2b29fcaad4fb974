"""Categorization rule repository."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.categorization.rules import RuleStore
from ledger.models.categorization_rule import CategorizationRule
from ledger.repositories.base import BaseRepository


class CategorizationRuleRepository(BaseRepository[CategorizationRule]):
    """Repository for CategorizationRule model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, CategorizationRule)

    async def get_all_ordered(self) -> list[CategorizationRule]:
        """Rules in match order: priority, then creation time, then id."""
        result = await self.db.execute(
            select(CategorizationRule).order_by(
                CategorizationRule.priority,
                CategorizationRule.created_at,
                CategorizationRule.id,
            )
        )
        return list(result.scalars().all())

    async def get_by_match_key(self, match_key: str) -> CategorizationRule | None:
        result = await self.db.execute(
            select(CategorizationRule).where(CategorizationRule.match_key == match_key)
        )
        return result.scalar_one_or_none()

    async def get_by_category(self, category_id: str) -> list[CategorizationRule]:
        result = await self.db.execute(
            select(CategorizationRule).where(CategorizationRule.category_id == category_id)
        )
        return list(result.scalars().all())

    async def load_rule_store(self) -> RuleStore:
        """Immutable snapshot of all rules for the Categorizer."""
        return RuleStore.from_rows(await self.get_all_ordered())
