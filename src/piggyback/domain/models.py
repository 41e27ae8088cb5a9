from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from piggyback.domain.enums import AssignmentSource, TransactionStatus

@dataclass(frozen=True)
class Transaction:
    """Core domain model representing a single bank transaction"""
    id: str
    description: str
    amount_cents: int
    category_id: Optional[str] = None
    parent_category_id: Optional[str] = None
    category_name: Optional[str] = None
    transfer_account_id: Optional[str] = None
    round_up_amount_cents: Optional[int] = None
    transaction_type: Optional[str] = None
    status: TransactionStatus = TransactionStatus.SETTLED
    created_at: Optional[datetime] = None
    settled_at: Optional[datetime] = None

    @property
    def is_spend(self) -> bool:
        """Money going out of the account"""
        return self.amount_cents < 0

    @property
    def is_transfer(self) -> bool:
        return self.transfer_account_id is not None

    def __repr__(self):
        sign = "+" if self.amount_cents >= 0 else "-"
        dollars = abs(self.amount_cents) / 100
        return f"Transaction({self.id}, {self.description[:30]}, {sign}${dollars:.2f})"


@dataclass(frozen=True)
class CategoryOverride:
    """
    A user's explicit correction for one transaction.

    The original_* fields remember what the transaction was categorized as
    before the first override, for the audit trail.
    """
    transaction_id: str
    category_id: Optional[str]
    parent_category_id: Optional[str] = None
    original_category_id: Optional[str] = None
    original_parent_category_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class MerchantRule:
    """Standing rule: every transaction with this exact description gets this category"""
    merchant_description: str
    category_id: str
    parent_category_id: Optional[str] = None


@dataclass(frozen=True)
class CategoryAssignment:
    """Final category pair for a transaction, plus the layer that decided it"""
    category_id: Optional[str]
    parent_category_id: Optional[str]
    source: AssignmentSource = AssignmentSource.INFERRED


@dataclass(frozen=True)
class CategorySignals:
    """Everything the category resolver is allowed to look at"""
    description: str = ""
    amount_cents: int = 0
    provider_category_id: Optional[str] = None
    transfer_account_id: Optional[str] = None
    round_up_amount_cents: Optional[int] = None
    transaction_type: Optional[str] = None

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "CategorySignals":
        """Build signals from a freshly synced transaction (category_id is the provider's)"""
        return cls(
            description=transaction.description,
            amount_cents=transaction.amount_cents,
            provider_category_id=transaction.category_id,
            transfer_account_id=transaction.transfer_account_id,
            round_up_amount_cents=transaction.round_up_amount_cents,
            transaction_type=transaction.transaction_type,
        )
