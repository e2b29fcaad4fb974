"""Transaction categorization.

Categories are resolved deterministically from the text attached to a
transaction (UPI handle, merchant name, SMS sender). User-defined rules take
precedence over the built-in keyword table. Everything here is pure and
synchronous, so a single instance can be shared across concurrent tasks.
"""

from .categorizer import Categorizer
from .keywords import KeywordClassifier
from .rules import RuleStore

__all__ = ["Categorizer", "KeywordClassifier", "RuleStore"]
