from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from piggyback.categorization.base import CategorizationRule
from piggyback.categorization.categories import UNCATEGORIZED
from piggyback.categorization.rules import (
    DefaultRule,
    KeywordRule,
    ProviderCategoryRule,
    RoundUpRule,
    TransactionTypeRule,
    TransferRule,
    link_chain,
)
from piggyback.config.settings import ConfigLoader
from piggyback.domain.models import CategorySignals
from piggyback.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class InferenceTables:
    """
    Static lookup tables used by the resolver.

    Built once from `inference_rules.json` and read-only afterwards.
    """
    transaction_types: Mapping[str, str]
    income_types: Tuple[str, ...]
    income_category: Optional[str]
    keywords: Mapping[str, Tuple[str, ...]]

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "InferenceTables":
        income = config.get("income_types") or {}
        return cls(
            transaction_types=MappingProxyType(dict(config.get("transaction_types") or {})),
            income_types=tuple(income.get("types") or ()),
            income_category=income.get("category"),
            keywords=MappingProxyType({
                category: tuple(words)
                for category, words in (config.get("keywords") or {}).items()
            }),
        )

    @classmethod
    def empty(cls) -> "InferenceTables":
        return cls.from_config({})


class CategoryResolver:
    """
    Infers one best-guess category id from a transaction's signals.

    Builds a chain of rules in priority order:
    1. Transfer to one of the user's accounts
    2. Non-zero round-up amount
    3. Known non-purchase transaction type
    4. Provider's own category
    5. Description keywords
    6. Default (uncategorized)

    Usage:
        # Production - loads tables from ConfigLoader
        resolver = CategoryResolver()

        # Testing - inject tables
        resolver = CategoryResolver(config={"keywords": {...}})

        category_id = resolver.resolve(signals)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the resolver.

        Args:
            config: Optional inference config dict. If None, loads from ConfigLoader.
        """
        self.tables = self._load_tables(config)
        self._rule_chain: CategorizationRule = self._build_rule_chain(self.tables)

    def _load_tables(self, config: Optional[Dict[str, Any]]) -> InferenceTables:
        if config is not None:
            return InferenceTables.from_config(config)

        try:
            return InferenceTables.from_config(ConfigLoader.load_inference_config())
        except FileNotFoundError:
            logger.warning("No inference_rules.json found, using empty inference tables")
            return InferenceTables.empty()

    def _build_rule_chain(self, tables: InferenceTables) -> CategorizationRule:
        rules: List[CategorizationRule] = [
            TransferRule(),
            RoundUpRule(),
            TransactionTypeRule(
                tables.transaction_types,
                income_types=tables.income_types,
                income_category=tables.income_category,
            ),
            ProviderCategoryRule(),
        ]
        if tables.keywords:
            rules.append(KeywordRule(tables.keywords))
        rules.append(DefaultRule(UNCATEGORIZED))

        return link_chain(rules)

    def resolve(self, signals: CategorySignals) -> str:
        """
        Resolve the category id for one set of signals.

        Never returns None: falls back to the uncategorized sentinel.

        Example:
            ```
            >>> resolver = CategoryResolver()
            >>> resolver.resolve(CategorySignals(description="Coles", round_up_amount_cents=50))
            'round-up'
            ```
        """
        category = self._rule_chain.categorize(signals)
        return category or UNCATEGORIZED

    def resolve_many(self, signals_list: Iterable[CategorySignals]) -> List[str]:
        return [self.resolve(signals) for signals in signals_list]

    def describe_chain(self) -> str:
        """
        Get information about the current rule chain.

        Useful for debugging and understanding which rules are active.
        """
        rules = []
        current = self._rule_chain
        priority = 1

        while current:
            rules.append(f"{priority}. {current}")
            current = current._next_rule
            priority += 1

        return "\n".join(rules)

    def __repr__(self) -> str:
        num_rules = 0
        current = self._rule_chain
        while current:
            num_rules += 1
            current = current._next_rule

        return f"CategoryResolver({num_rules} rules in chain)"


_default_resolver: Optional[CategoryResolver] = None


def resolve_category(signals: CategorySignals) -> str:
    """Resolve with a process-wide resolver built from the default config."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = CategoryResolver()
    return _default_resolver.resolve(signals)
