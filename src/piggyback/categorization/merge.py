"""
Combine stored user choices with the inferred category.

Priority is strict and evaluated once per transaction:
override for the transaction > merchant rule for its exact description >
resolver output (with the provider's parent category).
"""
from typing import Dict, Iterable, Mapping, Optional

from piggyback.domain.enums import AssignmentSource
from piggyback.domain.models import CategoryAssignment, CategoryOverride, MerchantRule, Transaction


def index_overrides(overrides: Iterable[CategoryOverride]) -> Dict[str, CategoryOverride]:
    """Key overrides by transaction id. A later row replaces an earlier one."""
    return {override.transaction_id: override for override in overrides}


def index_merchant_rules(rules: Iterable[MerchantRule]) -> Dict[str, MerchantRule]:
    """Key merchant rules by their exact description. A later row replaces an earlier one."""
    return {rule.merchant_description: rule for rule in rules}


def merge_category(
    transaction: Transaction,
    overrides_by_txn_id: Optional[Mapping[str, CategoryOverride]],
    rules_by_description: Optional[Mapping[str, MerchantRule]],
    resolver_output: Optional[str],
) -> CategoryAssignment:
    """
    Pick the final category pair for one transaction.

    Args:
        transaction: The synced transaction
        overrides_by_txn_id: Per-transaction corrections, None means none
        rules_by_description: Merchant rules keyed by exact description, None means none
        resolver_output: Category id inferred from the transaction's signals

    Returns:
        CategoryAssignment recording the winning layer
    """
    override = (overrides_by_txn_id or {}).get(transaction.id)
    if override is not None:
        return CategoryAssignment(
            category_id=override.category_id,
            parent_category_id=override.parent_category_id,
            source=AssignmentSource.OVERRIDE,
        )

    rule = (rules_by_description or {}).get(transaction.description)
    if rule is not None:
        return CategoryAssignment(
            category_id=rule.category_id,
            parent_category_id=rule.parent_category_id,
            source=AssignmentSource.MERCHANT_RULE,
        )

    return CategoryAssignment(
        category_id=resolver_output,
        parent_category_id=transaction.parent_category_id,
        source=AssignmentSource.INFERRED,
    )
