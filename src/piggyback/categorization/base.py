from abc import ABC, abstractmethod
from typing import Optional

from piggyback.domain.models import CategorySignals

class CategorizationRule(ABC):
    """
    One step of the category resolver.

    Each rule looks at a single kind of signal (a transfer account, a
    round-up amount, the bank's transaction type, its category, the
    description) and either claims the transaction or hands it on.
    The resolver links the rules from strongest signal to weakest and
    ends with a rule that always matches.

    Usage:
        ```
        head = TransferRule()
        head.set_next(RoundUpRule()).set_next(DefaultRule())

        category_id = head.categorize(signals)
        ```
    """

    def __init__(self):
        self._next_rule: Optional['CategorizationRule'] = None

    def set_next(self, rule: 'CategorizationRule') -> 'CategorizationRule':
        """Link `rule` after this one and return it, so links can be chained."""
        self._next_rule = rule
        return rule

    @abstractmethod
    def _matches(self, signals: CategorySignals) -> bool:
        """Whether this rule's signal is present. Must not raise on odd input."""
        pass

    @abstractmethod
    def _get_category(self, signals: CategorySignals) -> str:
        """Category id for signals this rule matched."""
        pass

    def categorize(self, signals: CategorySignals) -> Optional[str]:
        """
        Category id from the first rule in the chain that matches.

        Returns:
            Category id, or None when the chain ends without a match
            (only possible if it has no default rule)
        """
        if self._matches(signals):
            return self._get_category(signals)

        if self._next_rule:
            return self._next_rule.categorize(signals)

        return None

    def __repr__(self):
        return f"{self.__class__.__name__}()"
