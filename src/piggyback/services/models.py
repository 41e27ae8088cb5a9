"""
Service layer models - DTOs for service operations.

These models represent the results of service operations, not domain entities.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from piggyback.domain.enums import AssignmentSource
from piggyback.domain.models import CategoryOverride, MerchantRule, Transaction

@dataclass
class SyncResult:
    """
    Result of categorizing one batch of synced transactions.

    Counts how many transactions each layer decided, so a sync can report
    what happened.
    """
    transactions: List[Transaction] = field(default_factory=list)
    sources: List[AssignmentSource] = field(default_factory=list)
    uncategorized: int = 0

    @property
    def total(self) -> int:
        return len(self.transactions)

    @property
    def overridden(self) -> int:
        return self.sources.count(AssignmentSource.OVERRIDE)

    @property
    def rule_applied(self) -> int:
        return self.sources.count(AssignmentSource.MERCHANT_RULE)

    @property
    def inferred(self) -> int:
        return self.sources.count(AssignmentSource.INFERRED)

    def __str__(self) -> str:
        "Human-readable summary"
        lines = [
            f"Categorized {self.total} transactions:",
            f" ✏️ Overrides: {self.overridden}",
            f" 🏷️ Merchant rules: {self.rule_applied}",
            f" 🔍 Inferred: {self.inferred}",
        ]

        if self.uncategorized:
            lines.append(f" ❓ Uncategorized: {self.uncategorized}")

        return "\n".join(lines)

    def __post_init__(self):
        """Validate counts match lists"""
        if len(self.transactions) != len(self.sources):
            raise ValueError(
                f"Count mismatch: {len(self.transactions)} transactions "
                f"but {len(self.sources)} sources"
            )


@dataclass
class RecategorizeResult:
    """
    Result of a user recategorizing a transaction.

    Holds everything the caller has to persist: the transaction's override,
    an optional merchant rule, and the other transactions it touched.
    """
    transaction: Transaction
    override: CategoryOverride
    override_created: bool
    merchant_rule: Optional[MerchantRule] = None
    bulk_updated: List[Transaction] = field(default_factory=list)
    bulk_overrides: List[CategoryOverride] = field(default_factory=list)

    @property
    def bulk_updated_count(self) -> int:
        return len(self.bulk_updated)


@dataclass(frozen=True)
class CategorySpending:
    """Spending total for one category in one budget view"""
    category_name: str
    total_cents: int
    transaction_count: int

    @property
    def total_dollars(self) -> float:
        return self.total_cents / 100
