"""Category repository."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.defaults import default_categories
from ledger.models.category import Category
from ledger.models.enums import CategoryType
from ledger.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def get_all_ordered(self, type: CategoryType | None = None) -> list[Category]:
        """Default categories first, then alphabetical."""
        q = select(Category)
        if type is not None:
            q = q.where(Category.type == type)
        result = await self.db.execute(q.order_by(Category.is_default.desc(), Category.name))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Category))
        return int(result.scalar() or 0)

    async def get_name_map(self) -> dict[str, str]:
        """Mapping of category id -> display name."""
        result = await self.db.execute(select(Category.id, Category.name))
        return {row.id: row.name for row in result}

    async def seed_defaults(self) -> int:
        """Insert any built-in category that is missing. Returns the number added."""
        existing = set((await self.get_name_map()).keys())
        added = 0
        for values in default_categories():
            if values["id"] in existing:
                continue
            self.db.add(Category(**values))
            added += 1
        if added:
            await self.db.flush()
        return added
