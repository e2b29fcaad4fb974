"""Built-in keyword fallback for categorization.

Used only when no user rule matches. Groups are evaluated in a fixed order
and the first group with a matching keyword wins, even if a later group
would also match.
"""

from __future__ import annotations

# Ordering matters: earlier groups win.
KEYWORD_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("food", ("swiggy", "zomato", "restaurant", "cafe", "food")),
    ("shopping", ("amazon", "flipkart", "myntra", "shop", "store")),
    ("transportation", ("uber", "ola", "rapido", "petrol", "fuel", "pump")),
    ("bills", ("electricity", "water", "gas", "bill", "recharge", "mobile", "broadband")),
    ("entertainment", ("netflix", "spotify", "hotstar", "prime", "movie", "cinema")),
    ("groceries", ("grocery", "supermarket", "mart", "basket", "blinkit", "zepto", "instamart")),
)


class KeywordClassifier:
    """Static keyword table mapping text to a default category id."""

    def __init__(self, groups: tuple[tuple[str, tuple[str, ...]], ...] = KEYWORD_GROUPS):
        self._groups = groups

    def classify(self, text: str | None) -> str | None:
        """Return the category id of the first matching group, or None."""
        if not text or not text.strip():
            return None
        lowered = text.lower()
        for category_id, keywords in self._groups:
            if any(keyword in lowered for keyword in keywords):
                return category_id
        return None
