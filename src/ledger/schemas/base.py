"""Shared schema helpers.

Input schemas are validated with pydantic; ``parse`` converts pydantic's
ValidationError into the ledger's own ValidationError so callers only ever
see catalog error codes.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationInfo
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from ledger.config import settings
from ledger.core.exceptions import ValidationError
from ledger.core.money import MAX_MINOR

M = TypeVar("M", bound=BaseModel)

AMOUNT_FIELDS = {"amount", "target_amount"}


def not_blank(value: str | None, field: str) -> str | None:
    """Strip a text field, rejecting whitespace-only values."""
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        raise PydanticCustomError("blank", "{field} cannot be blank", {"field": field})
    return stripped


def minor_unit_of(info: ValidationInfo | None) -> int:
    """Currency minor unit for this validation run.

    Services pass their own via ``parse(..., minor_unit=...)``; plain model
    construction uses the application settings.
    """
    context = info.context if info is not None else None
    if context and context.get("minor_unit") is not None:
        return context["minor_unit"]
    return settings.currency_minor_unit


def check_amount(value: Decimal | None, info: ValidationInfo | None = None) -> Decimal | None:
    """Amounts must be finite, positive, storable and fit the currency minor unit."""
    if value is None:
        return None
    if not value.is_finite() or value <= 0:
        raise PydanticCustomError("amount", "Amount must be greater than zero")
    places = minor_unit_of(info)
    try:
        quantized = value.quantize(Decimal(1).scaleb(-places))
    except InvalidOperation:
        raise PydanticCustomError("amount", "Amount is too large") from None
    if value != quantized:
        raise PydanticCustomError(
            "precision", "Amount has more than {places} decimal places", {"places": places}
        )
    if quantized.scaleb(places) > MAX_MINOR:
        raise PydanticCustomError("amount", "Amount is too large")
    return value


def _error_code(error: dict) -> str:
    field = error["loc"][0] if error["loc"] else None
    if error["type"] == "precision":
        return "VAL_002"
    if error["type"] in ("missing", "blank"):
        return "VAL_003"
    if field in AMOUNT_FIELDS:
        return "VAL_001"
    return "VAL_004"


def parse(model: Type[M], data: Any, minor_unit: int | None = None) -> M:
    """Validate ``data`` into ``model``.

    ``minor_unit`` overrides the currency minor unit used to check amounts.

    Raises:
        ValidationError: With the code of the first failing field
    """
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return model.model_validate(data, context={"minor_unit": minor_unit})
    except PydanticValidationError as e:
        errors = e.errors()
        first = errors[0]
        raise ValidationError(
            _error_code(first),
            {
                "field": ".".join(str(part) for part in first["loc"]),
                "reason": first["msg"],
            },
        ) from e
