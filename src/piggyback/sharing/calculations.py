"""
Shared budget calculations.

- "My Budget" shows personal expenses at 100% plus shared expenses at the
  user's percentage.
- "Our Budget" shows only shared expenses, at their full amount.

Priority order for every function:
1. Transaction-level override
2. Category-level config
3. Personal (not shared) when nothing is configured

Percentage splits are rounded half up once per transaction. There is no
remainder carry across a batch, so summed splits can drift from a true
proportional split by a few cents over many transactions.
"""
from decimal import ROUND_FLOOR, Decimal
from typing import Iterable, Optional, Union

from piggyback.domain.enums import BudgetView
from piggyback.domain.models import Transaction
from piggyback.sharing.models import (
    CategoryShareConfig,
    Percentage,
    ShareConfig,
    ShareSummary,
    TransactionShareOverride,
)

_HALF = Decimal("0.5")


def _round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, ties towards positive infinity."""
    return int((value + _HALF).to_integral_value(rounding=ROUND_FLOOR))


def _split(amount_cents: int, percentage: Percentage) -> int:
    return _round_half_up(Decimal(amount_cents) * Decimal(str(percentage)) / 100)


def _override_for(
    transaction: Transaction, config: ShareConfig
) -> Optional[TransactionShareOverride]:
    return config.transaction_overrides.get(transaction.id)


def _category_for(
    transaction: Transaction, config: ShareConfig
) -> Optional[CategoryShareConfig]:
    return config.category_shares.get(transaction.category_name or "")


def my_budget_amount(transaction: Transaction, config: ShareConfig) -> int:
    """
    Amount (signed cents) the signed-in user is responsible for.

    - Override marked personal: full amount
    - Override marked shared: override percentage of the amount
    - Shared category: category percentage of the amount
    - Otherwise: full amount (personal expense)
    """
    override = _override_for(transaction, config)
    if override is not None:
        if not override.is_shared:
            return transaction.amount_cents
        return _split(transaction.amount_cents, override.share_percentage)

    category = _category_for(transaction, config)
    if category is not None and category.is_shared:
        return _split(transaction.amount_cents, category.share_percentage)

    return transaction.amount_cents


def our_budget_amount(transaction: Transaction, config: ShareConfig) -> int:
    """
    Amount (signed cents) shown in the shared household view.

    Shared transactions count in full, personal ones count as 0.
    """
    return transaction.amount_cents if is_transaction_shared(transaction, config) else 0


def is_transaction_shared(transaction: Transaction, config: ShareConfig) -> bool:
    """Whether the transaction appears in "Our Budget" at all"""
    override = _override_for(transaction, config)
    if override is not None:
        return override.is_shared

    category = _category_for(transaction, config)
    if category is not None:
        return category.is_shared

    return False


def transaction_share_percentage(transaction: Transaction, config: ShareConfig) -> Percentage:
    """The user's effective percentage. Personal transactions are 100."""
    override = _override_for(transaction, config)
    if override is not None:
        return override.share_percentage if override.is_shared else 100

    category = _category_for(transaction, config)
    if category is not None and category.is_shared:
        return category.share_percentage

    return 100


def category_spending_total(
    transactions: Iterable[Transaction],
    category_name: str,
    config: ShareConfig,
    view: Union[BudgetView, str] = BudgetView.MY,
) -> int:
    """
    Total spending (positive cents) for one category in the given view.

    Args:
        transactions: Transactions to total
        category_name: Exact category name to filter on
        config: Share config snapshot
        view: BudgetView.MY or BudgetView.OUR (or their string values)

    Returns:
        Sum of absolute per-transaction amounts
    """
    view = BudgetView(view)
    amount_for = my_budget_amount if view is BudgetView.MY else our_budget_amount

    return sum(
        abs(amount_for(txn, config))
        for txn in transactions
        if txn.category_name == category_name
    )


def share_summary(transactions: Iterable[Transaction], config: ShareConfig) -> ShareSummary:
    """Single pass over transactions splitting totals into shared and personal."""
    total_shared = 0
    total_personal = 0
    user_share_of_shared = 0

    for txn in transactions:
        amount = abs(txn.amount_cents)
        if is_transaction_shared(txn, config):
            total_shared += amount
            user_share_of_shared += abs(my_budget_amount(txn, config))
        else:
            total_personal += amount

    return ShareSummary(
        total_shared=total_shared,
        total_personal=total_personal,
        user_share_of_shared=user_share_of_shared,
    )


def income_proportional_split(user_income: int, partner_income: int) -> int:
    """
    User's percentage (0-100) when splitting in proportion to income.

    Falls back to an even 50/50 split when neither partner has income.
    """
    total_income = user_income + partner_income
    if total_income == 0:
        return 50

    return _round_half_up(Decimal(user_income) / Decimal(total_income) * 100)
