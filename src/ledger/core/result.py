"""Tagged success/failure results for ledger operations.

Services raise LedgerError subclasses internally. Callers that prefer not to
deal with exceptions (event handlers, batch jobs) wrap a call with
``capture`` and branch on ``result.ok``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Generic, TypeVar, Union

from ledger.core.exceptions import LedgerError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying the operation's value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying the LedgerError that aborted the operation."""

    error: LedgerError

    @property
    def ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    @property
    def error_code(self) -> str:
        return self.error.error_code

    @property
    def user_message(self) -> str:
        return self.error.user_message

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Ok[T], Err]


async def capture(operation: Awaitable[T]) -> Result[T]:
    """Await an operation and fold LedgerError into an Err.

    Anything that is not a LedgerError (programming errors, cancellation)
    propagates unchanged.
    """
    try:
        return Ok(await operation)
    except LedgerError as e:
        return Err(e)
