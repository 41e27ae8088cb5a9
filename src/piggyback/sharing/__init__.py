"""
Shared-budget split engine.

Works out how much of each transaction belongs in "My Budget" and in
"Our Budget" from a validated ShareConfig snapshot.
"""
from piggyback.sharing.models import (
    CategoryShareConfig,
    InvalidShareConfigError,
    ShareConfig,
    ShareSummary,
    TransactionShareOverride,
    build_share_config,
)
from piggyback.sharing.calculations import (
    category_spending_total,
    income_proportional_split,
    is_transaction_shared,
    my_budget_amount,
    our_budget_amount,
    share_summary,
    transaction_share_percentage,
)

__all__ = [
    "CategoryShareConfig",
    "InvalidShareConfigError",
    "ShareConfig",
    "ShareSummary",
    "TransactionShareOverride",
    "build_share_config",
    "category_spending_total",
    "income_proportional_split",
    "is_transaction_shared",
    "my_budget_amount",
    "our_budget_amount",
    "share_summary",
    "transaction_share_percentage",
]
