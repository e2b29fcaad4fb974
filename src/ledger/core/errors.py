"""Error codes and user-friendly messages.

This module defines the error catalog for ledger operations.
Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

# Shown for every consistency failure; the details only go to the logs.
_GENERIC_SAVE_FAILURE = "Failed to save, please retry."

ERROR_CATALOG: dict[str, dict] = {
    # Validation
    "VAL_001": {
        "code": "VAL_001",
        "message": "Amount must be a positive number",
        "user_message": "Enter a valid amount.",
        "suggestion": "Amounts must be greater than zero.",
        "retry_allowed": False,
    },
    "VAL_002": {
        "code": "VAL_002",
        "message": "Amount has more precision than the currency minor unit",
        "user_message": "Enter a valid amount.",
        "suggestion": "Use at most two decimal places.",
        "retry_allowed": False,
    },
    "VAL_003": {
        "code": "VAL_003",
        "message": "Required field is blank",
        "user_message": "Some required information is missing.",
        "suggestion": "Fill in all required fields and try again.",
        "retry_allowed": False,
    },
    "VAL_004": {
        "code": "VAL_004",
        "message": "Field value is out of range",
        "user_message": "One of the values you entered is out of range.",
        "suggestion": "Check the highlighted field and try again.",
        "retry_allowed": False,
    },
    "VAL_005": {
        "code": "VAL_005",
        "message": "Duplicate categorization rule text",
        "user_message": "A rule with this text already exists.",
        "suggestion": "Edit the existing rule instead of adding a new one.",
        "retry_allowed": False,
    },
    # Not found
    "NF_001": {
        "code": "NF_001",
        "message": "Ledger entry not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "NF_002": {
        "code": "NF_002",
        "message": "Account not found",
        "user_message": "The selected account no longer exists.",
        "suggestion": "Choose a different account.",
        "retry_allowed": False,
    },
    "NF_003": {
        "code": "NF_003",
        "message": "Category not found",
        "user_message": "The selected category no longer exists.",
        "suggestion": "Choose a different category.",
        "retry_allowed": False,
    },
    "NF_004": {
        "code": "NF_004",
        "message": "Savings goal not found",
        "user_message": "We couldn't find this savings goal.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "NF_005": {
        "code": "NF_005",
        "message": "Budget not found",
        "user_message": "We couldn't find this budget.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "NF_006": {
        "code": "NF_006",
        "message": "Categorization rule not found",
        "user_message": "We couldn't find this rule.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "NF_007": {
        "code": "NF_007",
        "message": "Recurring expense not found",
        "user_message": "We couldn't find this recurring item.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    # Consistency
    "CONS_001": {
        "code": "CONS_001",
        "message": "Balance adjustment affected no account row",
        "user_message": _GENERIC_SAVE_FAILURE,
        "suggestion": "Please try again. Contact support if the problem persists.",
        "retry_allowed": True,
    },
    "CONS_002": {
        "code": "CONS_002",
        "message": "Stored account balance diverges from its ledger entries",
        "user_message": _GENERIC_SAVE_FAILURE,
        "suggestion": "Please try again. Contact support if the problem persists.",
        "retry_allowed": True,
    },
    "CONS_003": {
        "code": "CONS_003",
        "message": "Database transaction failed during ledger persistence",
        "user_message": _GENERIC_SAVE_FAILURE,
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    # Invalid operations
    "OP_001": {
        "code": "OP_001",
        "message": "Default categories cannot be deleted",
        "user_message": "Built-in categories can't be deleted.",
        "suggestion": "You can hide it or create your own category instead.",
        "retry_allowed": False,
    },
    "OP_002": {
        "code": "OP_002",
        "message": "Goal saved amount would become negative",
        "user_message": "This change would take more out of the goal than it holds.",
        "suggestion": "Reduce the amount or contribute to the goal first.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details; a generic definition for unknown codes
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def get_suggestion(error_code: str) -> str:
    """Get actionable suggestion for an error code."""
    return get_error(error_code)["suggestion"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
