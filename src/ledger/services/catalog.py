"""Management of the ledger's reference data.

Categories, categorization rules, accounts, budgets and savings goals are
edited here. Balances and saved amounts are never written directly: an
account starts at its opening balance and a goal at zero, and from then on
only the reconciler moves them.

Deleting a category, account or goal never touches ledger entries. Entries
keep the old id and read views show them under a placeholder label.
"""

import logging

from sqlalchemy import update

from ledger.categorization.rules import RuleStore, normalize_match_text
from ledger.config import Settings, settings as default_settings
from ledger.core.exceptions import InvalidOperationError, NotFoundError, ValidationError
from ledger.core.money import to_minor
from ledger.db.session import Database
from ledger.models.account import Account
from ledger.models.budget import Budget
from ledger.models.categorization_rule import CategorizationRule
from ledger.models.category import Category
from ledger.models.enums import CategoryType
from ledger.models.savings_goal import SavingsGoal
from ledger.repositories.account import AccountRepository
from ledger.repositories.budget import BudgetRepository
from ledger.repositories.categorization_rule import CategorizationRuleRepository
from ledger.repositories.category import CategoryRepository
from ledger.repositories.savings_goal import SavingsGoalRepository
from ledger.schemas.base import parse
from ledger.schemas.catalog import (
    AccountCreate,
    AccountUpdate,
    BudgetCreate,
    BudgetUpdate,
    CategoryCreate,
    CategoryUpdate,
    GoalCreate,
    GoalUpdate,
    RuleCreate,
    RuleUpdate,
)

logger = logging.getLogger(__name__)


def _join_senders(sender_ids: list[str]) -> str | None:
    cleaned = [s.strip().upper() for s in sender_ids if s and s.strip()]
    return ",".join(cleaned) or None


class CatalogService:
    """Service layer for categories, rules, accounts, budgets and goals."""

    def __init__(self, db: Database, settings: Settings | None = None):
        self.db = db
        self.settings = settings or default_settings
        self.minor_unit = self.settings.currency_minor_unit

    # Categories

    async def seed_defaults(self) -> int:
        """Insert any missing built-in category. Safe to call on every start."""
        async with self.db.transaction() as session:
            added = await CategoryRepository(session).seed_defaults()
        if added:
            logger.info("Seeded default categories", extra={"categories_count": added})
        return added

    async def list_categories(self, type: CategoryType | None = None) -> list[Category]:
        async with self.db.session() as session:
            return await CategoryRepository(session).get_all_ordered(type)

    async def get_category(self, category_id: str) -> Category:
        async with self.db.session() as session:
            category = await CategoryRepository(session).get_by_id(category_id)
        if category is None:
            raise NotFoundError("NF_003", {"category_id": category_id})
        return category

    async def create_category(self, data: CategoryCreate | dict) -> Category:
        category_in = parse(CategoryCreate, data)
        async with self.db.transaction() as session:
            repo = CategoryRepository(session)
            if category_in.id is not None and await repo.exists(category_in.id):
                raise ValidationError("VAL_004", {"field": "id", "reason": "already exists"})
            category = Category(**category_in.model_dump(exclude_none=True), is_default=False)
            category = await repo.create(category)
        logger.info("Category created", extra={"category_id": category.id})
        return category

    async def update_category(self, category_id: str, data: CategoryUpdate | dict) -> Category:
        changes = parse(CategoryUpdate, data).model_dump(exclude_unset=True, exclude_none=True)
        async with self.db.transaction() as session:
            category = await CategoryRepository(session).update(category_id, changes)
        if category is None:
            raise NotFoundError("NF_003", {"category_id": category_id})
        return category

    async def delete_category(self, category_id: str) -> None:
        """Delete a user category and the rules that point at it.

        Raises:
            NotFoundError: No such category
            InvalidOperationError: The category is one of the built-in defaults
        """
        async with self.db.transaction() as session:
            repo = CategoryRepository(session)
            category = await repo.get_by_id(category_id)
            if category is None:
                raise NotFoundError("NF_003", {"category_id": category_id})
            if category.is_default:
                raise InvalidOperationError("OP_001", {"category_id": category_id})

            rules = CategorizationRuleRepository(session)
            for rule in await rules.get_by_category(category_id):
                await rules.delete(rule.id)
            await repo.delete(category_id)
        logger.info("Category deleted", extra={"category_id": category_id})

    # Categorization rules

    async def list_rules(self) -> list[CategorizationRule]:
        async with self.db.session() as session:
            return await CategorizationRuleRepository(session).get_all_ordered()

    async def load_rule_store(self) -> RuleStore:
        """Fresh immutable snapshot of the rules for a Categorizer."""
        async with self.db.session() as session:
            return await CategorizationRuleRepository(session).load_rule_store()

    async def add_rule(self, data: RuleCreate | dict) -> CategorizationRule:
        """Add a rule. Rule text is unique case-insensitively.

        Raises:
            ValidationError: Blank text (VAL_003) or duplicate text (VAL_005)
            NotFoundError: The target category does not exist
        """
        rule_in = parse(RuleCreate, data)
        match_key = normalize_match_text(rule_in.match_text)
        async with self.db.transaction() as session:
            if not await CategoryRepository(session).exists(rule_in.category_id):
                raise NotFoundError("NF_003", {"category_id": rule_in.category_id})
            repo = CategorizationRuleRepository(session)
            if await repo.get_by_match_key(match_key) is not None:
                raise ValidationError("VAL_005", {"match_text": rule_in.match_text})
            rule = await repo.create(
                CategorizationRule(
                    match_text=rule_in.match_text,
                    match_key=match_key,
                    category_id=rule_in.category_id,
                    priority=rule_in.priority,
                )
            )
        logger.info(
            "Categorization rule added",
            extra={"rule_id": rule.id, "category_id": rule.category_id},
        )
        return rule

    async def update_rule(self, rule_id: str, data: RuleUpdate | dict) -> CategorizationRule:
        changes = parse(RuleUpdate, data).model_dump(exclude_unset=True, exclude_none=True)
        async with self.db.transaction() as session:
            repo = CategorizationRuleRepository(session)
            rule = await repo.get_by_id(rule_id)
            if rule is None:
                raise NotFoundError("NF_006", {"rule_id": rule_id})
            if "category_id" in changes and not await CategoryRepository(session).exists(
                changes["category_id"]
            ):
                raise NotFoundError("NF_003", {"category_id": changes["category_id"]})
            if "match_text" in changes:
                match_key = normalize_match_text(changes["match_text"])
                existing = await repo.get_by_match_key(match_key)
                if existing is not None and existing.id != rule_id:
                    raise ValidationError("VAL_005", {"match_text": changes["match_text"]})
                changes["match_key"] = match_key
            rule = await repo.update(rule_id, changes)
        return rule

    async def delete_rule(self, rule_id: str) -> None:
        async with self.db.transaction() as session:
            if not await CategorizationRuleRepository(session).delete(rule_id):
                raise NotFoundError("NF_006", {"rule_id": rule_id})

    # Accounts

    async def list_accounts(self) -> list[Account]:
        async with self.db.session() as session:
            return await AccountRepository(session).get_all_ordered()

    async def get_account(self, account_id: str) -> Account:
        async with self.db.session() as session:
            account = await AccountRepository(session).get_by_id(account_id)
        if account is None:
            raise NotFoundError("NF_002", {"account_id": account_id})
        return account

    async def create_account(self, data: AccountCreate | dict) -> Account:
        """Create an account whose balance starts at its opening balance."""
        account_in = parse(AccountCreate, data)
        opening = to_minor(account_in.opening_balance, self.minor_unit)
        async with self.db.transaction() as session:
            repo = AccountRepository(session)
            if account_in.id is not None and await repo.exists(account_in.id):
                raise ValidationError("VAL_004", {"field": "id", "reason": "already exists"})
            if account_in.is_default:
                await self._clear_default(session)
            values = account_in.model_dump(
                exclude={"opening_balance", "linked_sender_ids"}, exclude_none=True
            )
            account = await repo.create(
                Account(
                    **values,
                    opening_balance=opening,
                    balance=opening,
                    linked_sender_ids=_join_senders(account_in.linked_sender_ids),
                )
            )
        logger.info("Account created", extra={"account_id": account.id})
        return account

    async def update_account(self, account_id: str, data: AccountUpdate | dict) -> Account:
        changes = parse(AccountUpdate, data).model_dump(exclude_unset=True)
        if "linked_sender_ids" in changes:
            changes["linked_sender_ids"] = _join_senders(changes["linked_sender_ids"] or [])
        if changes.get("name", "") is None:
            del changes["name"]
        async with self.db.transaction() as session:
            repo = AccountRepository(session)
            if not await repo.exists(account_id):
                raise NotFoundError("NF_002", {"account_id": account_id})
            if changes.get("is_default"):
                await self._clear_default(session)
            account = await repo.update(account_id, changes)
        return account

    async def set_default_account(self, account_id: str) -> Account:
        return await self.update_account(account_id, {"is_default": True})

    async def delete_account(self, account_id: str) -> None:
        """Delete an account. Its entries stay and render as "Unknown"."""
        async with self.db.transaction() as session:
            if not await AccountRepository(session).delete(account_id):
                raise NotFoundError("NF_002", {"account_id": account_id})
        logger.info("Account deleted", extra={"account_id": account_id})

    async def _clear_default(self, session) -> None:
        await session.execute(
            update(Account).where(Account.is_default == True).values(is_default=False)
        )

    # Budgets

    async def list_budgets(self) -> list[Budget]:
        async with self.db.session() as session:
            return await BudgetRepository(session).get_all()

    async def create_budget(self, data: BudgetCreate | dict) -> Budget:
        budget_in = parse(BudgetCreate, data, self.minor_unit)
        async with self.db.transaction() as session:
            if not await CategoryRepository(session).exists(budget_in.category_id):
                raise NotFoundError("NF_003", {"category_id": budget_in.category_id})
            threshold = budget_in.alert_threshold
            if threshold is None:
                threshold = self.settings.default_alert_threshold
            budget = await BudgetRepository(session).create(
                Budget(
                    category_id=budget_in.category_id,
                    amount=to_minor(budget_in.amount, self.minor_unit),
                    period=budget_in.period,
                    alert_threshold=threshold,
                )
            )
        logger.info("Budget created", extra={"budget_id": budget.id})
        return budget

    async def update_budget(self, budget_id: str, data: BudgetUpdate | dict) -> Budget:
        changes = parse(BudgetUpdate, data, self.minor_unit).model_dump(exclude_unset=True, exclude_none=True)
        if "amount" in changes:
            changes["amount"] = to_minor(changes["amount"], self.minor_unit)
        async with self.db.transaction() as session:
            budget = await BudgetRepository(session).update(budget_id, changes)
        if budget is None:
            raise NotFoundError("NF_005", {"budget_id": budget_id})
        return budget

    async def delete_budget(self, budget_id: str) -> None:
        async with self.db.transaction() as session:
            if not await BudgetRepository(session).delete(budget_id):
                raise NotFoundError("NF_005", {"budget_id": budget_id})

    # Savings goals

    async def list_goals(self) -> list[SavingsGoal]:
        async with self.db.session() as session:
            return await SavingsGoalRepository(session).get_all_ordered()

    async def get_goal(self, goal_id: str) -> SavingsGoal:
        async with self.db.session() as session:
            goal = await SavingsGoalRepository(session).get_by_id(goal_id)
        if goal is None:
            raise NotFoundError("NF_004", {"goal_id": goal_id})
        return goal

    async def create_goal(self, data: GoalCreate | dict) -> SavingsGoal:
        goal_in = parse(GoalCreate, data, self.minor_unit)
        async with self.db.transaction() as session:
            repo = SavingsGoalRepository(session)
            if goal_in.id is not None and await repo.exists(goal_in.id):
                raise ValidationError("VAL_004", {"field": "id", "reason": "already exists"})
            values = goal_in.model_dump(exclude={"target_amount"}, exclude_none=True)
            goal = await repo.create(
                SavingsGoal(
                    **values,
                    target_amount=to_minor(goal_in.target_amount, self.minor_unit),
                    saved_amount=0,
                )
            )
        logger.info("Savings goal created", extra={"goal_id": goal.id})
        return goal

    async def update_goal(self, goal_id: str, data: GoalUpdate | dict) -> SavingsGoal:
        changes = parse(GoalUpdate, data, self.minor_unit).model_dump(exclude_unset=True)
        if changes.get("target_amount") is not None:
            changes["target_amount"] = to_minor(changes["target_amount"], self.minor_unit)
        for key in ("name", "target_amount", "icon", "color"):
            if key in changes and changes[key] is None:
                del changes[key]
        async with self.db.transaction() as session:
            goal = await SavingsGoalRepository(session).update(goal_id, changes)
        if goal is None:
            raise NotFoundError("NF_004", {"goal_id": goal_id})
        return goal

    async def delete_goal(self, goal_id: str) -> None:
        """Delete a goal. Goal-linked entries stay; their effect on the account is kept."""
        async with self.db.transaction() as session:
            if not await SavingsGoalRepository(session).delete(goal_id):
                raise NotFoundError("NF_004", {"goal_id": goal_id})
        logger.info("Savings goal deleted", extra={"goal_id": goal_id})
