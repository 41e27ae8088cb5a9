import pytest

from piggyback.domain.enums import BudgetView
from piggyback.services.budget_view_service import BudgetViewService
from piggyback.sharing import build_share_config


@pytest.fixture
def service() -> BudgetViewService:
    return BudgetViewService()


@pytest.fixture
def config():
    return build_share_config(
        [
            {"category_name": "Groceries", "is_shared": True, "share_percentage": 50},
            {"category_name": "Gaming", "is_shared": False, "share_percentage": 100},
        ],
        [{"transaction_id": "t4", "is_shared": True, "share_percentage": 25}],
    )


@pytest.fixture
def transactions(make_txn):
    return [
        make_txn("t1", -10000, "Groceries"),
        make_txn("t2", -3000, "Groceries"),
        make_txn("t3", -6000, "Gaming"),
        make_txn("t4", -4000, "Gaming"),
        make_txn("t5", -1000, None),
        make_txn("t6", 250000, "Income"),
    ]


@pytest.mark.unit
class TestCategoryBreakdown:

    def test_my_view(self, service, transactions, config):
        rows = service.category_breakdown(transactions, config, BudgetView.MY)

        assert [(r.category_name, r.total_cents, r.transaction_count) for r in rows] == [
            ("Gaming", 7000, 2),
            ("Groceries", 6500, 2),
            ("Uncategorized", 1000, 1),
        ]

    def test_our_view_only_shows_shared(self, service, transactions, config):
        rows = service.category_breakdown(transactions, config, "our")

        assert [(r.category_name, r.total_cents, r.transaction_count) for r in rows] == [
            ("Groceries", 13000, 2),
            ("Gaming", 4000, 1),
        ]

    def test_income_is_not_spending(self, service, transactions, config):
        rows = service.category_breakdown(transactions, config)

        assert "Income" not in {r.category_name for r in rows}

    def test_uncategorized_merges_empty_and_missing_names(self, service, make_txn, config):
        rows = service.category_breakdown(
            [make_txn("a", -100, None), make_txn("b", -200, "")], config
        )

        assert len(rows) == 1
        assert rows[0].category_name == "Uncategorized"
        assert rows[0].total_cents == 300
        assert rows[0].transaction_count == 2


@pytest.mark.unit
class TestSummary:

    def test_summary_ignores_income(self, service, transactions, config):
        summary = service.summary(transactions, config)

        assert summary.total_shared == 17000
        assert summary.user_share_of_shared == 7500
        assert summary.partner_share_of_shared == 9500
        assert summary.total_personal == 7000
