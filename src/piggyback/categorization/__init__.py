"""
Transaction categorization.

Infers a category from bank signals using a chain of responsibility and
merges it with the user's overrides and merchant rules.

Quick Start:
    >>> from piggyback.categorization import CategoryResolver, merge_category
    >>>
    >>> resolver = CategoryResolver()
    >>> inferred = resolver.resolve(CategorySignals.from_transaction(txn))
    >>> assignment = merge_category(txn, overrides, rules, inferred)
"""
from piggyback.categorization.resolver import CategoryResolver, InferenceTables, resolve_category
from piggyback.categorization.merge import index_merchant_rules, index_overrides, merge_category
from piggyback.categorization.base import CategorizationRule
from piggyback.categorization.rules import (
    TransferRule,
    RoundUpRule,
    TransactionTypeRule,
    ProviderCategoryRule,
    KeywordRule,
    DefaultRule,
)
from piggyback.categorization import categories

__all__ = [
    "CategoryResolver",
    "InferenceTables",
    "resolve_category",
    "merge_category",
    "index_overrides",
    "index_merchant_rules",
    "CategorizationRule",
    "TransferRule",
    "RoundUpRule",
    "TransactionTypeRule",
    "ProviderCategoryRule",
    "KeywordRule",
    "DefaultRule",
    "categories",
]
