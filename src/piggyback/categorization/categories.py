"""
Fixed category identifiers.

The bank leaves transfers, round-ups, salary and interest uncategorized, so
these ids are assigned locally and must exist in the category table before
any transaction references them.
"""
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

UNCATEGORIZED = "uncategorized"

SALARY_INCOME = "salary-income"
INTERNAL_TRANSFER = "internal-transfer"
EXTERNAL_TRANSFER = "external-transfer"
ROUND_UP = "round-up"
INTEREST = "interest"
INVESTMENTS = "investments"
FEES = "fees"

INFERRED_CATEGORIES: Mapping[str, str] = MappingProxyType({
    SALARY_INCOME: "Salary & Income",
    INTERNAL_TRANSFER: "Internal Transfer",
    EXTERNAL_TRANSFER: "External Transfer",
    ROUND_UP: "Round Up Savings",
    INTEREST: "Interest Earned",
    INVESTMENTS: "Investments",
    FEES: "Fees & Charges",
})


def category_display_name(category_id: Optional[str]) -> str:
    """Human label for a locally assigned category id."""
    if not category_id or category_id == UNCATEGORIZED:
        return "Uncategorized"
    return INFERRED_CATEGORIES.get(category_id, category_id)


def sort_parent_first(categories: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Order category records so every parent comes before its children.

    Each record needs an "id" and an optional "parent_category_id".
    Records whose parent never shows up (or that form a cycle) are
    appended at the end in their original order.

    Args:
        categories: Category records as returned by the provider

    Returns:
        New list, parents first
    """
    remaining = list(categories)
    processed = set()
    ordered: List[Dict[str, Any]] = []

    while remaining:
        ready = [
            c for c in remaining
            if not c.get("parent_category_id") or c["parent_category_id"] in processed
        ]
        if not ready:
            ordered.extend(remaining)
            break

        for category in ready:
            ordered.append(category)
            processed.add(category["id"])
        remaining = [c for c in remaining if c["id"] not in processed]

    return ordered
