from dataclasses import replace
from typing import Iterable, List, Mapping, Optional

from piggyback.categorization import CategoryResolver, index_merchant_rules, index_overrides, merge_category
from piggyback.categorization.categories import UNCATEGORIZED
from piggyback.domain.models import CategoryOverride, CategorySignals, MerchantRule, Transaction
from piggyback.logging_setup import get_logger
from piggyback.services.models import RecategorizeResult, SyncResult

logger = get_logger(__name__)


class CategorizationService:

    def __init__(self, resolver: Optional[CategoryResolver] = None):
        self._resolver: Optional[CategoryResolver] = resolver

    @property
    def resolver(self) -> CategoryResolver:
        """Lazy-load category resolver"""
        if self._resolver is None:
            self._resolver = CategoryResolver()
        return self._resolver

    def categorize_batch(
        self,
        transactions: Iterable[Transaction],
        overrides: Iterable[CategoryOverride] = (),
        merchant_rules: Iterable[MerchantRule] = (),
    ) -> SyncResult:
        """
        Categorize one page of freshly synced transactions.

        Overrides and merchant rules are indexed once for the whole batch,
        then each transaction goes through the resolver and the priority merge.

        Args:
            transactions: Transactions as received from the provider
            overrides: Stored per-transaction corrections
            merchant_rules: Stored merchant rules

        Returns:
            SyncResult with categorized copies, in input order
        """
        overrides_by_txn_id = index_overrides(overrides)
        rules_by_description = index_merchant_rules(merchant_rules)

        result = SyncResult()
        for txn in transactions:
            inferred = self.resolver.resolve(CategorySignals.from_transaction(txn))
            assignment = merge_category(txn, overrides_by_txn_id, rules_by_description, inferred)

            if assignment.category_id in (None, UNCATEGORIZED):
                result.uncategorized += 1

            result.transactions.append(replace(
                txn,
                category_id=assignment.category_id,
                parent_category_id=assignment.parent_category_id,
            ))
            result.sources.append(assignment.source)

        logger.info(
            "Categorized %d transactions (%d overrides, %d merchant rules, %d inferred)",
            result.total, result.overridden, result.rule_applied, result.inferred,
        )
        return result

    def recategorize(
        self,
        transaction: Transaction,
        category_id: Optional[str],
        parent_category_id: Optional[str] = None,
        existing_overrides: Optional[Mapping[str, CategoryOverride]] = None,
        apply_to_merchant: bool = False,
        merchant_transactions: Iterable[Transaction] = (),
        notes: Optional[str] = None,
    ) -> RecategorizeResult:
        """
        Apply a user's manual category choice.

        Args:
            transaction: The transaction the user changed
            category_id: New category (None clears it)
            parent_category_id: Parent of the new category
            existing_overrides: Stored overrides keyed by transaction id
            apply_to_merchant: Also create a merchant rule and update every
                other transaction with the same exact description
            merchant_transactions: Candidate transactions for the bulk update
            notes: Optional note stored with the override

        Returns:
            RecategorizeResult with everything the caller must persist

        Example:
            ```
            result = service.recategorize(txn, "groceries", "good-life",
                                          apply_to_merchant=True,
                                          merchant_transactions=all_txns)
            ```
        """
        existing_overrides = existing_overrides or {}

        previous = existing_overrides.get(transaction.id)
        override = self._build_override(
            transaction, category_id, parent_category_id, previous, notes
        )
        updated = replace(
            transaction,
            category_id=category_id,
            parent_category_id=parent_category_id,
        )
        result = RecategorizeResult(
            transaction=updated,
            override=override,
            override_created=previous is None,
        )

        if not (apply_to_merchant and category_id and transaction.description):
            return result

        result.merchant_rule = MerchantRule(
            merchant_description=transaction.description,
            category_id=category_id,
            parent_category_id=parent_category_id,
        )

        merchant_note = f'Merchant rule: All "{transaction.description}" transactions'
        for other in merchant_transactions:
            if other.id == transaction.id or other.description != transaction.description:
                continue

            result.bulk_overrides.append(self._build_override(
                other,
                category_id,
                parent_category_id,
                existing_overrides.get(other.id),
                merchant_note,
            ))
            result.bulk_updated.append(replace(
                other,
                category_id=category_id,
                parent_category_id=parent_category_id,
            ))

        logger.info(
            "Merchant rule for '%s' updated %d other transactions",
            transaction.description, result.bulk_updated_count,
        )
        return result

    def _build_override(
        self,
        transaction: Transaction,
        category_id: Optional[str],
        parent_category_id: Optional[str],
        previous: Optional[CategoryOverride],
        notes: Optional[str],
    ) -> CategoryOverride:
        """New override, or an update that keeps the first recorded original category."""
        if previous is None:
            return CategoryOverride(
                transaction_id=transaction.id,
                category_id=category_id,
                parent_category_id=parent_category_id,
                original_category_id=transaction.category_id,
                original_parent_category_id=transaction.parent_category_id,
                notes=notes,
            )

        return replace(
            previous,
            category_id=category_id,
            parent_category_id=parent_category_id,
            notes=notes or previous.notes,
        )
