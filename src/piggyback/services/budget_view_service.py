from typing import Dict, Iterable, List, Optional, Union

from piggyback.domain.enums import BudgetView
from piggyback.domain.models import Transaction
from piggyback.services.models import CategorySpending
from piggyback.sharing import (
    ShareConfig,
    ShareSummary,
    category_spending_total,
    is_transaction_shared,
    share_summary,
)

UNCATEGORIZED_LABEL = "Uncategorized"


class BudgetViewService:
    """Per-category totals for the My Budget and Our Budget views."""

    def visible_transactions(
        self,
        transactions: Iterable[Transaction],
        config: ShareConfig,
        view: Union[BudgetView, str] = BudgetView.MY,
    ) -> List[Transaction]:
        """Spending transactions that appear in the view (Our shows shared ones only)."""
        view = BudgetView(view)
        spending = [txn for txn in transactions if txn.is_spend]
        if view is BudgetView.OUR:
            return [txn for txn in spending if is_transaction_shared(txn, config)]
        return spending

    def category_breakdown(
        self,
        transactions: Iterable[Transaction],
        config: ShareConfig,
        view: Union[BudgetView, str] = BudgetView.MY,
    ) -> List[CategorySpending]:
        """
        Spending per category in the given view, largest first.

        Transactions without a category name are reported as "Uncategorized".
        """
        visible = self.visible_transactions(transactions, config, view)

        names: List[Optional[str]] = []
        for txn in visible:
            if txn.category_name not in names:
                names.append(txn.category_name)

        totals: Dict[str, List[int]] = {}
        for name in names:
            label = name or UNCATEGORIZED_LABEL
            entry = totals.setdefault(label, [0, 0])
            entry[0] += category_spending_total(visible, name, config, view)
            entry[1] += sum(1 for txn in visible if txn.category_name == name)

        rows = [
            CategorySpending(category_name=label, total_cents=total, transaction_count=count)
            for label, (total, count) in totals.items()
        ]
        return sorted(rows, key=lambda row: row.total_cents, reverse=True)

    def summary(self, transactions: Iterable[Transaction], config: ShareConfig) -> ShareSummary:
        """Shared vs personal totals over the spending transactions."""
        return share_summary([txn for txn in transactions if txn.is_spend], config)
