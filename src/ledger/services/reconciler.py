"""Balance reconciliation for ledger writes.

Every write to the ledger goes through ``BalanceReconciler`` so that:

- an account's balance always equals its opening balance plus the signed
  effect of every entry that references it (+amount income, -amount expense)
- a goal's saved amount always includes the effect of every goal-linked
  entry (expense moves money into the goal, income takes it back out)

Each public operation runs in a single ``Database.transaction()``. Balance
changes are SQL increments (``balance = balance + :delta``), so concurrent
operations on the same account never lose updates, and any failure,
cancellation included, leaves no partial effect behind.

Edits reverse the old effect before applying the new one; when the account
(or goal) is unchanged the two deltas are folded into a single increment.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.config import Settings, settings as default_settings
from ledger.core.defaults import GOALS_CATEGORY_ID
from ledger.core.exceptions import (
    ConsistencyError,
    InvalidOperationError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from ledger.core.money import from_minor, positive_minor, to_minor
from ledger.core.result import Result, capture
from ledger.db.session import Database
from ledger.models.base import utcnow
from ledger.models.enums import TransactionType
from ledger.models.ledger_entry import LedgerEntry
from ledger.repositories.account import AccountRepository
from ledger.repositories.category import CategoryRepository
from ledger.repositories.ledger_entry import LedgerEntryRepository
from ledger.repositories.recurring_expense import RecurringExpenseRepository
from ledger.repositories.savings_goal import SavingsGoalRepository
from ledger.schemas.base import parse
from ledger.schemas.ledger import EntryCreate, EntryUpdate, EntryView
from ledger.schemas.views import BalanceRepair, GoalAdjustment

logger = logging.getLogger(__name__)

# field -> (repository, not-found code)
_REFERENCES = {
    "account_id": (AccountRepository, "NF_002"),
    "category_id": (CategoryRepository, "NF_003"),
    "goal_id": (SavingsGoalRepository, "NF_004"),
    "recurring_id": (RecurringExpenseRepository, "NF_007"),
}


class BalanceReconciler:
    """Creates, edits and deletes ledger entries and moves money into and out of goals."""

    def __init__(self, db: Database, settings: Settings | None = None):
        """Initialize the reconciler.

        Args:
            db: Shared database handle
            settings: Application settings (reference policy, debug logging)
        """
        self.db = db
        self.settings = settings or default_settings
        self.minor_unit = self.settings.currency_minor_unit

    # ------------------------------------------------------------------
    # Transaction scope
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def write_scope(self, operation: str, **context: Any) -> AsyncIterator[AsyncSession]:
        """Write transaction that logs whatever aborts it.

        Database failures surface as ConsistencyError (CONS_003), so callers
        only ever handle LedgerError.
        """
        try:
            async with self.db.transaction() as session:
                yield session
        except ConsistencyError as e:
            logger.error(
                "Ledger consistency check failed",
                extra={
                    "operation": operation,
                    "error_code": e.error_code,
                    "details": e.details,
                    **context,
                },
            )
            raise
        except LedgerError as e:
            logger.warning(
                "Ledger operation rejected",
                extra={"operation": operation, "error_code": e.error_code, **context},
            )
            raise
        except SQLAlchemyError as e:
            if self.settings.debug:
                logger.exception(
                    "Ledger write failed",
                    extra={"operation": operation, "error_type": type(e).__name__, **context},
                )
            else:
                logger.error(
                    "Ledger write failed",
                    extra={"operation": operation, "error_type": type(e).__name__, **context},
                )
            raise ConsistencyError(
                "CONS_003", {"operation": operation, "error_type": type(e).__name__}
            ) from e

    # ------------------------------------------------------------------
    # Entry operations
    # ------------------------------------------------------------------

    async def create_entry(self, data: EntryCreate | dict) -> EntryView:
        """Record a new entry and apply its effect to its account (and goal).

        Raises:
            ValidationError: Amount missing, not positive or too precise
            NotFoundError: A referenced row is missing (strict policy)
            InvalidOperationError: Goal-linked income larger than the goal holds
            ConsistencyError: The balance update did not land
        """
        entry_in = parse(EntryCreate, data, self.minor_unit)
        async with self.write_scope("create_entry") as session:
            entry = await self.create_entry_in(session, entry_in)
            return EntryView.from_entry(entry, self.minor_unit)

    async def create_entry_in(self, session: AsyncSession, data: EntryCreate | dict) -> LedgerEntry:
        """Create an entry inside a transaction the caller already holds."""
        entry_in = parse(EntryCreate, data, self.minor_unit)
        entries = LedgerEntryRepository(session)

        if entry_in.id is not None and await entries.exists(entry_in.id):
            raise ValidationError("VAL_004", {"field": "id", "reason": "already exists"})

        fields = entry_in.model_dump(exclude={"id", "amount"})
        fields["amount"] = to_minor(entry_in.amount, self.minor_unit)
        for field in _REFERENCES:
            fields[field] = await self._check_reference(session, field, fields[field])

        entry = LedgerEntry(**fields)
        if entry_in.id is not None:
            entry.id = entry_in.id
        entry = await entries.create(entry)

        await self._move_balance(session, entry.account_id, entry.signed_amount)
        await self._move_goal(session, entry.goal_id, entry.goal_amount)

        logger.info(
            "Ledger entry created",
            extra={"entry_id": entry.id, "type": entry.type.value, "account_id": entry.account_id},
        )
        return entry

    async def update_entry(self, entry_id: str, changes: EntryUpdate | dict) -> EntryView:
        """Edit an entry, reversing its old effect and applying the new one.

        The merged entry is validated before anything is written, so a
        rejected edit leaves balances untouched.

        Raises:
            NotFoundError: The entry (NF_001) or a newly referenced row is missing
            ValidationError: The merged entry is invalid
        """
        update_in = parse(EntryUpdate, changes, self.minor_unit)
        async with self.write_scope("update_entry", entry_id=entry_id) as session:
            entries = LedgerEntryRepository(session)
            entry = await entries.get_by_id(entry_id)
            if entry is None:
                raise NotFoundError("NF_001", {"entry_id": entry_id})

            change_set = update_in.model_dump(exclude_unset=True)
            merged = {
                "amount": from_minor(entry.amount, self.minor_unit),
                "type": entry.type,
                "category_id": entry.category_id,
                "account_id": entry.account_id,
                "txn_date": entry.txn_date,
                "note": entry.note,
                "recurring_id": entry.recurring_id,
                "goal_id": entry.goal_id,
                "debt_id": entry.debt_id,
            }
            merged.update(change_set)
            entry_in = parse(EntryCreate, merged, self.minor_unit)

            new_values = entry_in.model_dump(exclude={"id", "amount"})
            new_values["amount"] = to_minor(entry_in.amount, self.minor_unit)
            for field in _REFERENCES:
                # Untouched references are kept as they are, even if dangling.
                if field in change_set and new_values[field] != getattr(entry, field):
                    new_values[field] = await self._check_reference(session, field, new_values[field])

            old_account, old_signed = entry.account_id, entry.signed_amount
            old_goal, old_goal_amount = entry.goal_id, entry.goal_amount

            for key, value in new_values.items():
                setattr(entry, key, value)
            await session.flush()

            new_account, new_signed = entry.account_id, entry.signed_amount
            new_goal, new_goal_amount = entry.goal_id, entry.goal_amount

            if old_account == new_account:
                await self._move_balance(
                    session, new_account, new_signed - old_signed, required=False
                )
            else:
                await self._move_balance(session, old_account, -old_signed, required=False)
                await self._move_balance(session, new_account, new_signed)

            if old_goal == new_goal:
                await self._move_goal(
                    session, new_goal, new_goal_amount - old_goal_amount, required=False
                )
            else:
                await self._move_goal(session, old_goal, -old_goal_amount, required=False)
                await self._move_goal(session, new_goal, new_goal_amount)

            await session.refresh(entry)
            logger.info("Ledger entry updated", extra={"entry_id": entry_id})
            return EntryView.from_entry(entry, self.minor_unit)

    async def delete_entry(self, entry_id: str) -> bool:
        """Reverse an entry's effects and remove it.

        Deleting an id that does not exist is a successful no-op.

        Returns:
            True if an entry was removed, False if there was nothing to delete
        """
        async with self.write_scope("delete_entry", entry_id=entry_id) as session:
            return await self.delete_entry_in(session, entry_id)

    async def delete_entry_in(self, session: AsyncSession, entry_id: str) -> bool:
        entries = LedgerEntryRepository(session)
        entry = await entries.get_by_id(entry_id)
        if entry is None:
            logger.debug("Delete of missing ledger entry ignored", extra={"entry_id": entry_id})
            return False

        await self._move_balance(session, entry.account_id, -entry.signed_amount, required=False)
        await self._move_goal(session, entry.goal_id, -entry.goal_amount, required=False)
        await entries.delete(entry_id)

        logger.info("Ledger entry deleted", extra={"entry_id": entry_id})
        return True

    # ------------------------------------------------------------------
    # Savings goals
    # ------------------------------------------------------------------

    async def contribute(
        self,
        goal_id: str,
        amount: Decimal | int | str,
        account_id: str | None = None,
        txn_date: datetime | None = None,
    ) -> GoalAdjustment:
        """Add money to a goal.

        With an account, the money is taken from it: a goal-linked expense
        entry is recorded and its effect both debits the account and credits
        the goal.
        """
        minor = positive_minor(amount, self.minor_unit)
        async with self.write_scope("contribute", goal_id=goal_id) as session:
            goal = await SavingsGoalRepository(session).get_by_id(goal_id)
            if goal is None:
                raise NotFoundError("NF_004", {"goal_id": goal_id})

            entry_id = None
            if account_id is not None:
                entry = await self._goal_entry(
                    session,
                    goal_id=goal_id,
                    account_id=account_id,
                    amount=minor,
                    type=TransactionType.EXPENSE,
                    note=f"Contribution to {goal.name}",
                    txn_date=txn_date,
                )
                entry_id = entry.id
            else:
                await self._move_goal(session, goal_id, minor)

            saved = await SavingsGoalRepository(session).get_saved_amount(goal_id)
            logger.info("Goal contribution recorded", extra={"goal_id": goal_id, "entry_id": entry_id})
            return GoalAdjustment(
                goal_id=goal_id,
                requested=from_minor(minor, self.minor_unit),
                applied=from_minor(minor, self.minor_unit),
                saved_amount=from_minor(saved, self.minor_unit),
                entry_id=entry_id,
            )

    async def withdraw(
        self,
        goal_id: str,
        amount: Decimal | int | str,
        account_id: str | None = None,
        txn_date: datetime | None = None,
    ) -> GoalAdjustment:
        """Take money out of a goal, never below zero.

        Asking for more than the goal holds withdraws everything it holds;
        the result reports both the requested and the applied amount. With
        an account, the applied amount is credited to it as goal-linked
        income.
        """
        requested = positive_minor(amount, self.minor_unit)
        async with self.write_scope("withdraw", goal_id=goal_id) as session:
            goals = SavingsGoalRepository(session)
            goal = await goals.get_by_id(goal_id)
            if goal is None:
                raise NotFoundError("NF_004", {"goal_id": goal_id})

            saved = await goals.get_saved_amount(goal_id) or 0
            applied = min(requested, saved)
            entry_id = None
            if applied > 0:
                if account_id is not None:
                    entry = await self._goal_entry(
                        session,
                        goal_id=goal_id,
                        account_id=account_id,
                        amount=applied,
                        type=TransactionType.INCOME,
                        note=f"Withdrawal from {goal.name}",
                        txn_date=txn_date,
                    )
                    entry_id = entry.id
                else:
                    await self._move_goal(session, goal_id, -applied)

            if applied < requested:
                logger.info(
                    "Goal withdrawal clamped",
                    extra={"goal_id": goal_id, "requested": requested, "applied": applied},
                )
            return GoalAdjustment(
                goal_id=goal_id,
                requested=from_minor(requested, self.minor_unit),
                applied=from_minor(applied, self.minor_unit),
                saved_amount=from_minor(saved - applied, self.minor_unit),
                entry_id=entry_id,
            )

    async def _goal_entry(
        self,
        session: AsyncSession,
        goal_id: str,
        account_id: str,
        amount: int,
        type: TransactionType,
        note: str,
        txn_date: datetime | None,
    ) -> LedgerEntry:
        # Money actually moves, so the account must exist whatever the policy.
        if not await AccountRepository(session).exists(account_id):
            raise NotFoundError("NF_002", {"account_id": account_id})
        category_id = GOALS_CATEGORY_ID
        if not await CategoryRepository(session).exists(category_id):
            category_id = None

        entry = await LedgerEntryRepository(session).create(
            LedgerEntry(
                amount=amount,
                type=type,
                category_id=category_id,
                account_id=account_id,
                goal_id=goal_id,
                txn_date=txn_date or utcnow(),
                note=note,
            )
        )
        await self._move_balance(session, account_id, entry.signed_amount)
        await self._move_goal(session, goal_id, entry.goal_amount)
        return entry

    # ------------------------------------------------------------------
    # Repair and verification
    # ------------------------------------------------------------------

    async def recompute_account_balance(self, account_id: str) -> BalanceRepair:
        """Rewrite an account's balance from its opening balance and entries.

        Repair-only: normal writes keep the balance correct incrementally.
        """
        async with self.write_scope("recompute_account_balance", account_id=account_id) as session:
            stored, expected = await self._balances(session, account_id)
            if stored != expected:
                await AccountRepository(session).set_balance(account_id, expected)
                logger.warning(
                    "Account balance repaired",
                    extra={"account_id": account_id, "stored": stored, "recomputed": expected},
                )
            return BalanceRepair(
                account_id=account_id,
                stored=from_minor(stored, self.minor_unit),
                recomputed=from_minor(expected, self.minor_unit),
                correction=from_minor(expected - stored, self.minor_unit),
            )

    async def verify_account(self, account_id: str) -> None:
        """Raise ConsistencyError (CONS_002) if the stored balance has drifted."""
        async with self.db.session() as session:
            stored, expected = await self._balances(session, account_id)
        if stored != expected:
            error = ConsistencyError(
                "CONS_002",
                {"account_id": account_id, "stored": stored, "recomputed": expected},
            )
            logger.error(
                "Account balance diverges from ledger",
                extra={"error_code": error.error_code, "details": error.details},
            )
            raise error

    async def _balances(self, session: AsyncSession, account_id: str) -> tuple[int, int]:
        account = await AccountRepository(session).get_by_id(account_id)
        if account is None:
            raise NotFoundError("NF_002", {"account_id": account_id})
        effects = await LedgerEntryRepository(session).sum_signed_for_account(account_id)
        stored = await AccountRepository(session).get_balance(account_id)
        return stored, account.opening_balance + effects

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _check_reference(self, session: AsyncSession, field: str, ref_id: str | None) -> str | None:
        """Return ``ref_id`` if it resolves, else apply the reference policy."""
        if ref_id is None:
            return None
        repository, code = _REFERENCES[field]
        if await repository(session).exists(ref_id):
            return ref_id
        # Goal references move money and are always strict.
        if self.settings.reference_policy == "strict" or field == "goal_id":
            raise NotFoundError(code, {field: ref_id})
        logger.warning("Dropping dangling reference", extra={"field": field, "ref_id": ref_id})
        return None

    async def _move_balance(
        self, session: AsyncSession, account_id: str | None, delta: int, required: bool = True
    ) -> None:
        """Apply ``delta`` to an account balance.

        ``required=False`` is used when reversing an old effect: the account
        may have been deleted since, and there is nothing left to reverse.
        """
        if account_id is None or delta == 0:
            return
        accounts = AccountRepository(session)
        if await accounts.apply_delta(account_id, delta) == 1:
            return
        if not required and not await accounts.exists(account_id):
            logger.info("Skipped balance change on deleted account", extra={"account_id": account_id})
            return
        raise ConsistencyError("CONS_001", {"account_id": account_id, "delta": delta})

    async def _move_goal(
        self, session: AsyncSession, goal_id: str | None, delta: int, required: bool = True
    ) -> None:
        if goal_id is None or delta == 0:
            return
        goals = SavingsGoalRepository(session)
        if await goals.adjust_saved(goal_id, delta) == 1:
            return
        if not await goals.exists(goal_id):
            if not required:
                logger.info("Skipped goal change on deleted goal", extra={"goal_id": goal_id})
                return
            raise NotFoundError("NF_004", {"goal_id": goal_id})
        raise InvalidOperationError("OP_002", {"goal_id": goal_id, "delta": delta})

    # ------------------------------------------------------------------
    # Result-returning variants
    # ------------------------------------------------------------------

    async def try_create_entry(self, data: EntryCreate | dict) -> Result[EntryView]:
        return await capture(self.create_entry(data))

    async def try_update_entry(self, entry_id: str, changes: EntryUpdate | dict) -> Result[EntryView]:
        return await capture(self.update_entry(entry_id, changes))

    async def try_delete_entry(self, entry_id: str) -> Result[bool]:
        return await capture(self.delete_entry(entry_id))

    async def try_contribute(
        self, goal_id: str, amount: Decimal | int | str, account_id: str | None = None
    ) -> Result[GoalAdjustment]:
        return await capture(self.contribute(goal_id, amount, account_id))

    async def try_withdraw(
        self, goal_id: str, amount: Decimal | int | str, account_id: str | None = None
    ) -> Result[GoalAdjustment]:
        return await capture(self.withdraw(goal_id, amount, account_id))

    async def try_recompute_account_balance(self, account_id: str) -> Result[BalanceRepair]:
        return await capture(self.recompute_account_balance(account_id))

    async def try_verify_account(self, account_id: str) -> Result[None]:
        return await capture(self.verify_account(account_id))
