from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from piggyback.categorization.base import CategorizationRule
from piggyback.categorization.categories import INTERNAL_TRANSFER, ROUND_UP, UNCATEGORIZED
from piggyback.domain.models import CategorySignals


def _text(value) -> str:
    return value if isinstance(value, str) else ""


class TransferRule(CategorizationRule):
    """
    Money moved between two of the user's own accounts.

    A resolved local transfer account beats every other signal.
    """

    def __init__(self, category_id: str = INTERNAL_TRANSFER):
        super().__init__()
        self.category_id = category_id

    def _matches(self, signals: CategorySignals) -> bool:
        return bool(_text(signals.transfer_account_id))

    def _get_category(self, _: CategorySignals) -> str:
        return self.category_id

    def __repr__(self) -> str:
        return f"TransferRule('{self.category_id}')"


class RoundUpRule(CategorizationRule):
    """Spare change swept into savings: any non-zero round-up amount."""

    def __init__(self, category_id: str = ROUND_UP):
        super().__init__()
        self.category_id = category_id

    def _matches(self, signals: CategorySignals) -> bool:
        amount = signals.round_up_amount_cents
        if isinstance(amount, bool) or not isinstance(amount, int):
            return False
        return amount != 0

    def _get_category(self, _: CategorySignals) -> str:
        return self.category_id

    def __repr__(self) -> str:
        return f"RoundUpRule('{self.category_id}')"


class TransactionTypeRule(CategorizationRule):
    """
    Rule that maps non-purchase transaction types to fixed categories.

    Features:
    - Exact match on the bank's transaction type string
    - Income-only types that apply only to money coming in

    Example:
        ```
        rule = TransactionTypeRule(
            {"Interest": "interest"},
            income_types=["Direct Credit"],
            income_category="salary-income",
        )
        ```
    """

    def __init__(
        self,
        type_map: Mapping[str, str],
        income_types: Iterable[str] = (),
        income_category: Optional[str] = None,
    ):
        """
        Initialize transaction type rule

        Args:
            type_map: Dict mapping transaction types to category ids
            income_types: Types that only count as income when the amount is positive
            income_category: Category for matched income types
        """
        super().__init__()
        self.type_map = MappingProxyType(dict(type_map))
        self.income_types = frozenset(income_types) if income_category else frozenset()
        self.income_category = income_category

    def _is_income(self, signals: CategorySignals) -> bool:
        amount = signals.amount_cents
        return (
            _text(signals.transaction_type) in self.income_types
            and isinstance(amount, int)
            and amount > 0
        )

    def _matches(self, signals: CategorySignals) -> bool:
        """Check the type table, then the income-only types"""
        return _text(signals.transaction_type) in self.type_map or self._is_income(signals)

    def _get_category(self, signals: CategorySignals) -> str:
        transaction_type = _text(signals.transaction_type)
        if transaction_type in self.type_map:
            return self.type_map[transaction_type]
        return self.income_category

    def __repr__(self) -> str:
        return f"TransactionTypeRule({len(self.type_map)} types, {len(self.income_types)} income types)"


class ProviderCategoryRule(CategorizationRule):
    """The bank's own category, trusted over description heuristics."""

    def _matches(self, signals: CategorySignals) -> bool:
        return bool(_text(signals.provider_category_id))

    def _get_category(self, signals: CategorySignals) -> str:
        return signals.provider_category_id


class KeywordRule(CategorizationRule):
    """
    Rule that matches keywords in transaction descriptions.

    Features:
    - Case-insensitive substring matching
    - Can match multiple keywords per category
    - Categories are tried in table order

    Example:
        ```
        # Match "Pearler" or "VANGUARD" -> "investments"
        rule = KeywordRule({
            "investments": ["pearler", "vanguard"]
        })
        ```
    """

    def __init__(self, keyword_map: Mapping[str, Iterable[str]]):
        """
        Initialize keyword rule

        Args:
            keyword_map: Dict mapping category ids to list of keywords.
                Example: `{"investments": ["pearler", "vanguard"]}`
        """
        super().__init__()

        # Pre-process keywords to lowercase for case-insensitive matching
        normalized: Dict[str, Tuple[str, ...]] = {}
        for category, keywords in keyword_map.items():
            normalized[category] = tuple(kw.lower() for kw in keywords if kw)
        self._normalized_map = MappingProxyType(normalized)

    def _find(self, signals: CategorySignals) -> Optional[str]:
        description_lower = _text(signals.description).lower()
        if not description_lower:
            return None

        for category, keywords in self._normalized_map.items():
            for keyword in keywords:
                if keyword in description_lower:
                    return category
        return None

    def _matches(self, signals: CategorySignals) -> bool:
        """Check if any keyword matches the description"""
        return self._find(signals) is not None

    def _get_category(self, signals: CategorySignals) -> str:
        """Return the category for the matched keyword."""
        category = self._find(signals)
        if category is None:
            # _matches must have made a whoopsie
            raise RuntimeError("_get_category called but no match found")
        return category

    def __repr__(self):
        return f"KeywordRule({len(self._normalized_map)} categories)"


class DefaultRule(CategorizationRule):
    """
    Fallback rule that always matches.

    Should be the last rule in the chain.
    """

    def __init__(self, default_category: str = UNCATEGORIZED):
        super().__init__()
        self.default_category = default_category

    def _matches(self, _: CategorySignals) -> bool:
        """Always matches"""
        return True

    def _get_category(self, _: CategorySignals) -> str:
        return self.default_category

    def __repr__(self) -> str:
        return f"DefaultRule('{self.default_category}')"


def link_chain(rules: List[CategorizationRule]) -> CategorizationRule:
    """Link rules in list order and return the head of the chain."""
    for current, following in zip(rules, rules[1:]):
        current.set_next(following)
    return rules[0]
