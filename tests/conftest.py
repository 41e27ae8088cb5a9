import json
import pytest
from pathlib import Path
from typing import Callable, Optional

from piggyback.categorization.resolver import CategoryResolver
from piggyback.domain.models import Transaction
from piggyback.parsers.factory import ParserFactory

INFERENCE_CONFIG = {
    "transaction_types": {
        "Round Up": "round-up",
        "Salary": "salary-income",
        "Interest": "interest",
        "Fee": "fees",
        "Transfer": "external-transfer",
        "Scheduled Transfer": "external-transfer",
    },
    "income_types": {
        "category": "salary-income",
        "types": ["Direct Credit", "Deposit"],
    },
    "keywords": {
        "investments": ["pearler", "vanguard", "spaceship"],
    },
}


@pytest.fixture
def inference_config() -> dict:
    """Inference tables independent of the bundled defaults"""
    return json.loads(json.dumps(INFERENCE_CONFIG))


@pytest.fixture
def resolver(inference_config) -> CategoryResolver:
    return CategoryResolver(config=inference_config)


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    """Build transactions with sensible defaults"""
    def _make(
        id: str = "t1",
        amount_cents: int = -5000,
        category_name: Optional[str] = None,
        description: str = "Woolworths",
        **kwargs,
    ) -> Transaction:
        return Transaction(
            id=id,
            description=description,
            amount_cents=amount_cents,
            category_name=category_name,
            **kwargs,
        )
    return _make


@pytest.fixture
def clean_parser_registry():
    """Start and finish with an empty, unlocked parser registry"""
    ParserFactory.reset()
    yield
    ParserFactory.reset()


@pytest.fixture
def up_api_page() -> dict:
    """A small Up Bank transactions page"""
    return {
        "data": [
            {
                "type": "transactions",
                "id": "up-1",
                "attributes": {
                    "status": "SETTLED",
                    "description": "Woolworths",
                    "amount": {"currencyCode": "AUD", "value": "-50.00", "valueInBaseUnits": -5000},
                    "roundUp": {
                        "amount": {"currencyCode": "AUD", "value": "-0.50", "valueInBaseUnits": -50},
                        "boostPortion": None,
                    },
                    "transactionType": "Purchase",
                    "createdAt": "2025-01-15T10:00:00+11:00",
                    "settledAt": "2025-01-16T10:00:00+11:00",
                },
                "relationships": {
                    "category": {"data": {"type": "categories", "id": "groceries"}},
                    "parentCategory": {"data": {"type": "categories", "id": "good-life"}},
                    "transferAccount": {"data": None},
                },
            },
            {
                "type": "transactions",
                "id": "up-2",
                "attributes": {
                    "status": "HELD",
                    "description": "Transfer to Savings",
                    "amount": {"currencyCode": "AUD", "value": "-200.00", "valueInBaseUnits": -20000},
                    "roundUp": None,
                    "transactionType": "Transfer",
                    "createdAt": "2025-01-17T09:00:00Z",
                    "settledAt": None,
                },
                "relationships": {
                    "category": {"data": None},
                    "parentCategory": {"data": None},
                    "transferAccount": {"data": {"type": "accounts", "id": "up-saver"}},
                },
            },
            {
                "type": "transactions",
                "id": "up-3",
                "attributes": {
                    "description": "Broken",
                    "amount": {"currencyCode": "AUD", "value": "oops", "valueInBaseUnits": "oops"},
                },
            },
        ]
    }


@pytest.fixture
def up_api_file(tmp_path: Path, up_api_page: dict) -> Path:
    path = tmp_path / "page.json"
    path.write_text(json.dumps(up_api_page))
    return path


@pytest.fixture
def csv_export_file(tmp_path: Path) -> Path:
    """A CSV in the app's export format"""
    path = tmp_path / "export.csv"
    path.write_text(
        "Date,Description,Amount,Category,Subcategory,Status,Type\n"
        '15/01/2025,"Woolworths",-100.00,"Food & Drink","Groceries",SETTLED,Expense\n'
        '16/01/2025,"Netflix",-22.99,"Entertainment","Streaming",SETTLED,Expense\n'
        '17/01/2025,"Salary",3500.00,"Income","",SETTLED,Income\n'
        '18/01/2025,"Mystery shop",-10.00,"Uncategorized","",HELD,Expense\n'
        '19/01/2025,"Bad row",not-a-number,"Food & Drink","",SETTLED,Expense\n'
    )
    return path


@pytest.fixture
def snapshot_data() -> dict:
    return {
        "category_overrides": [
            {"transaction_id": "up-1", "category_id": "restaurants-and-cafes", "parent_category_id": "good-life"}
        ],
        "merchant_rules": [
            {"merchant_description": "Transfer to Savings", "category_id": "savings", "parent_category_id": None}
        ],
        "category_shares": [
            {"category_name": "Food & Drink", "is_shared": True, "share_percentage": 60},
            {"category_name": "Entertainment", "is_shared": False, "share_percentage": 100},
        ],
        "transaction_share_overrides": [],
    }


@pytest.fixture
def snapshot_file(tmp_path: Path, snapshot_data: dict) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_data))
    return path
