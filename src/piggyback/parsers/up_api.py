import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from piggyback.categorization.categories import category_display_name
from piggyback.domain.enums import TransactionStatus
from piggyback.domain.models import Transaction
from piggyback.logging_setup import get_logger
from piggyback.parsers.base import TransactionParser

logger = get_logger(__name__)


def _dig(data: Any, *keys: str) -> Any:
    """Follow nested dict keys, returning None at the first gap."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class UpApiParser(TransactionParser):
    """
    Parser for saved Up Bank API transaction pages.

    Expects the JSON:API document returned by the transactions endpoint:
    `{"data": [{"type": "transactions", "id": ..., "attributes": {...},
    "relationships": {...}}, ...], "links": {...}}`

    The provider's transfer account id only counts as a transfer when it
    resolves to one of the user's local accounts.
    """

    def __init__(
        self,
        local_account_ids: Optional[Mapping[str, str]] = None,
        category_names: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            local_account_ids: Provider account id -> local account id.
                If None, provider ids are used as-is.
            category_names: Category id -> display name. Ids missing from it
                fall back to the built-in catalog name, then the id itself.
        """
        self.local_account_ids = local_account_ids
        self.category_names = dict(category_names or {})

    def validate_file(self, filepath):
        """Check the file exists, is JSON, and holds a `data` list."""
        self._load(filepath)

    def _load(self, filepath) -> List[Any]:
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(f"File does not exist on path {path}")

        if path.suffix.lower() != ".json":
            raise ValueError(f"File must be .json, got {path.suffix}")

        try:
            with open(path) as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

        data = document.get("data") if isinstance(document, dict) else None
        if not isinstance(data, list):
            raise ValueError("Document has no 'data' list of transactions")

        return data

    def parse(self, filepath: str) -> List[Transaction]:
        """Parse every transaction resource, skipping malformed ones."""
        transactions = []
        for index, resource in enumerate(self._load(filepath)):
            try:
                transactions.append(self.parse_resource(resource))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping transaction resource %d: %s", index, e)

        return transactions

    def parse_resource(self, resource: Dict[str, Any]) -> Transaction:
        """
        Map one API transaction resource to a Transaction.

        Raises:
            KeyError: If the id, description or amount is missing
            ValueError: If a field has the wrong shape
        """
        attributes = resource["attributes"]
        relationships = resource.get("relationships") or {}

        amount = _dig(attributes, "amount", "valueInBaseUnits")
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"amount.valueInBaseUnits must be an integer, got {amount!r}")

        round_up = _dig(attributes, "roundUp", "amount", "valueInBaseUnits")
        if not isinstance(round_up, int) or isinstance(round_up, bool) or round_up == 0:
            round_up = None

        category_id = _dig(relationships, "category", "data", "id")

        return Transaction(
            id=str(resource["id"]),
            description=str(attributes["description"]),
            amount_cents=amount,
            category_id=category_id,
            category_name=self._category_name(category_id),
            parent_category_id=_dig(relationships, "parentCategory", "data", "id"),
            transfer_account_id=self._resolve_account(
                _dig(relationships, "transferAccount", "data", "id")
            ),
            round_up_amount_cents=round_up,
            transaction_type=attributes.get("transactionType") or None,
            status=TransactionStatus(attributes.get("status") or "SETTLED"),
            created_at=_parse_timestamp(attributes.get("createdAt")),
            settled_at=_parse_timestamp(attributes.get("settledAt")),
        )

    def _category_name(self, category_id: Optional[str]) -> Optional[str]:
        if not category_id:
            return None
        return self.category_names.get(category_id) or category_display_name(category_id)

    def _resolve_account(self, provider_account_id: Optional[str]) -> Optional[str]:
        if not provider_account_id:
            return None
        if self.local_account_ids is None:
            return provider_account_id
        return self.local_account_ids.get(provider_account_id)
