"""Tests for the rule cascade and keyword fallback."""
import pytest

from ledger.categorization import Categorizer, KeywordClassifier, RuleStore
from ledger.categorization.rules import Rule


@pytest.fixture
def categorizer() -> Categorizer:
    return Categorizer(RuleStore([Rule(id="r1", match_text="swig", category_id="food-custom")]))


class TestKeywordClassifier:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("ZOMATO ORDER", "food"),
            ("Flipkart Internet", "shopping"),
            ("UBER TRIP", "transportation"),
            ("BESCOM ELECTRICITY", "bills"),
            ("Spotify India", "entertainment"),
            ("BLINKIT", "groceries"),
        ],
    )
    def test_groups(self, text, expected):
        assert KeywordClassifier().classify(text) == expected

    def test_earlier_group_wins(self):
        # "food" (food group) and "mart" (groceries) both match
        assert KeywordClassifier().classify("FOOD MART") == "food"

    def test_no_match(self):
        assert KeywordClassifier().classify("RANDOM PERSON") is None
        assert KeywordClassifier().classify("") is None


class TestCategorizer:
    def test_user_rule_beats_keywords(self, categorizer):
        assert categorizer.categorize(merchant_name="SWIGGY") == "food-custom"

    def test_keyword_fallback_on_merchant(self, categorizer):
        assert categorizer.categorize(merchant_name="UBER TRIP") == "transportation"

    def test_upi_id_checked_before_merchant(self):
        categorizer = Categorizer(
            RuleStore(
                [
                    Rule(id="r1", match_text="okaxis", category_id="bills"),
                    Rule(id="r2", match_text="cafe", category_id="food"),
                ]
            )
        )
        assert categorizer.categorize(merchant_name="Cafe Coffee Day", upi_id="ccd@okaxis") == "bills"

    def test_rule_on_sender_beats_keyword_on_merchant(self):
        categorizer = Categorizer(RuleStore([Rule(id="r1", match_text="hdfcbk", category_id="bills")]))
        assert categorizer.categorize(merchant_name="ZOMATO", sender="VM-HDFCBK") == "bills"

    def test_keyword_fallback_uses_sender_without_merchant(self, categorizer):
        assert categorizer.categorize(sender="AMAZON") == "shopping"

    def test_blank_inputs_are_absent(self, categorizer):
        assert categorizer.categorize(merchant_name="  ", upi_id="", sender=None) is None

    def test_raw_text_is_not_matched(self, categorizer):
        assert categorizer.categorize(raw_text="Paid to SWIGGY via UPI") is None

    def test_no_rules_no_keywords(self):
        assert Categorizer().categorize(merchant_name="JOHN DOE") is None

    def test_repeatable(self, categorizer):
        first = categorizer.categorize(merchant_name="UBER TRIP", sender="AX-ICICI")
        assert all(
            categorizer.categorize(merchant_name="UBER TRIP", sender="AX-ICICI") == first
            for _ in range(5)
        )
