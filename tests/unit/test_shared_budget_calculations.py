import pytest

from piggyback.domain.enums import BudgetView
from piggyback.sharing import (
    CategoryShareConfig,
    ShareConfig,
    TransactionShareOverride,
    category_spending_total,
    income_proportional_split,
    is_transaction_shared,
    my_budget_amount,
    our_budget_amount,
    share_summary,
    transaction_share_percentage,
)


def make_config(categories=(), overrides=()) -> ShareConfig:
    """Build a ShareConfig from (name, is_shared, pct) and (txn_id, is_shared, pct) tuples"""
    return ShareConfig.from_entries(
        [CategoryShareConfig(name, shared, pct) for name, shared, pct in categories],
        [TransactionShareOverride(txn_id, shared, pct) for txn_id, shared, pct in overrides],
    )


@pytest.mark.unit
class TestMyBudgetAmount:

    def test_personal_when_nothing_configured(self, make_txn):
        txn = make_txn("t1", -5000, "Groceries")

        assert my_budget_amount(txn, make_config()) == -5000

    def test_applies_category_percentage(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 60)])

        assert my_budget_amount(txn, config) == -6000

    def test_personal_category_is_full_amount(self, make_txn):
        txn = make_txn("t1", -5000, "Gaming")
        config = make_config([("Gaming", False, 40)])

        assert my_budget_amount(txn, config) == -5000

    def test_override_beats_category(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 50)], [("t1", True, 30)])

        assert my_budget_amount(txn, config) == -3000

    def test_override_marked_personal_is_full_amount(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 50)], [("t1", False, 20)])

        assert my_budget_amount(txn, config) == -10000

    @pytest.mark.parametrize("amount, pct, expected", [
        (-3333, 50, -1666),   # -1666.5 rounds up towards zero
        (3333, 50, 1667),     # 1666.5 rounds up
        (-1001, 33, -330),    # -330.33
        (-999, 67, -669),     # -669.33
        (-10000, 0, 0),
        (-10000, 100, -10000),
        (-10000, 12.5, -1250),
    ])
    def test_rounds_half_up_once_per_transaction(self, make_txn, amount, pct, expected):
        txn = make_txn("t1", amount, "Groceries")
        config = make_config([("Groceries", True, pct)])

        assert my_budget_amount(txn, config) == expected

    def test_missing_category_name_matches_empty_key(self, make_txn):
        txn = make_txn("t1", -1000, None)
        config = make_config([("", True, 50)])

        assert my_budget_amount(txn, config) == -500


@pytest.mark.unit
class TestOurBudgetAmount:

    def test_personal_default_is_zero(self, make_txn):
        txn = make_txn("t1", -5000, "Groceries")

        assert our_budget_amount(txn, make_config()) == 0

    def test_shared_category_is_full_amount(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 60)])

        assert our_budget_amount(txn, config) == -10000

    def test_personal_category_is_zero(self, make_txn):
        txn = make_txn("t1", -10000, "Gaming")
        config = make_config([("Gaming", False, 100)])

        assert our_budget_amount(txn, config) == 0

    def test_override_marks_personal(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 60)], [("t1", False, 100)])

        assert our_budget_amount(txn, config) == 0

    def test_override_marks_shared(self, make_txn):
        txn = make_txn("t1", -10000, "Gaming")
        config = make_config([("Gaming", False, 100)], [("t1", True, 50)])

        assert our_budget_amount(txn, config) == -10000


@pytest.mark.unit
class TestShareResolution:

    def test_is_transaction_shared_priority(self, make_txn):
        config = make_config([("Groceries", True, 50)], [("t2", False, 100)])

        assert is_transaction_shared(make_txn("t1", -100, "Groceries"), config) is True
        assert is_transaction_shared(make_txn("t2", -100, "Groceries"), config) is False
        assert is_transaction_shared(make_txn("t3", -100, "Other"), config) is False

    def test_share_percentage_personal_is_100(self, make_txn):
        txn = make_txn("t1", -5000, "Groceries")

        assert transaction_share_percentage(txn, make_config()) == 100

    def test_share_percentage_from_category(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 60)])

        assert transaction_share_percentage(txn, config) == 60

    def test_share_percentage_from_override(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 60)], [("t1", True, 25)])

        assert transaction_share_percentage(txn, config) == 25

    def test_share_percentage_override_personal_is_100(self, make_txn):
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 60)], [("t1", False, 25)])

        assert transaction_share_percentage(txn, config) == 100

    def test_share_percentage_personal_category_is_100(self, make_txn):
        txn = make_txn("t1", -10000, "Gaming")
        config = make_config([("Gaming", False, 30)])

        assert transaction_share_percentage(txn, config) == 100

    def test_shared_category_scenario(self, make_txn):
        """-100.00 in a 60% shared category"""
        txn = make_txn("t1", -10000, "Groceries")
        config = make_config([("Groceries", True, 60)])

        assert my_budget_amount(txn, config) == -6000
        assert our_budget_amount(txn, config) == -10000
        assert transaction_share_percentage(txn, config) == 60

    def test_functions_are_repeatable(self, make_txn):
        txn = make_txn("t1", -3333, "Groceries")
        config = make_config([("Groceries", True, 50)])

        assert my_budget_amount(txn, config) == my_budget_amount(txn, config)
        assert our_budget_amount(txn, config) == our_budget_amount(txn, config)
        assert share_summary([txn], config) == share_summary([txn], config)


@pytest.mark.unit
class TestCategorySpendingTotal:

    def test_my_view_totals_absolute_amounts(self, make_txn):
        transactions = [
            make_txn("t1", -10000, "Groceries"),
            make_txn("t2", -5000, "Groceries"),
            make_txn("t3", -2000, "Gaming"),
        ]
        config = make_config([("Groceries", True, 50)])

        assert category_spending_total(transactions, "Groceries", config, BudgetView.MY) == 7500

    def test_our_view_totals_full_shared_amounts(self, make_txn):
        transactions = [
            make_txn("t1", -10000, "Groceries"),
            make_txn("t2", -5000, "Groceries"),
        ]
        config = make_config([("Groceries", True, 50)], [("t2", False, 100)])

        assert category_spending_total(transactions, "Groceries", config, BudgetView.OUR) == 10000

    def test_view_accepts_string_value(self, make_txn):
        transactions = [make_txn("t1", -10000, "Groceries")]
        config = make_config([("Groceries", True, 50)])

        assert category_spending_total(transactions, "Groceries", config, "our") == 10000

    def test_category_name_match_is_exact(self, make_txn):
        transactions = [make_txn("t1", -10000, "groceries")]

        assert category_spending_total(transactions, "Groceries", make_config()) == 0

    def test_empty_list(self):
        assert category_spending_total([], "Groceries", make_config()) == 0


@pytest.mark.unit
class TestShareSummary:

    def test_summary_splits_shared_and_personal(self, make_txn):
        transactions = [
            make_txn("t1", -10000, "Groceries"),
            make_txn("t2", -3000, "Gaming"),
            make_txn("t3", -2000, "Rent"),
        ]
        config = make_config([("Groceries", True, 60), ("Rent", True, 50)])

        summary = share_summary(transactions, config)

        assert summary.total_shared == 12000
        assert summary.total_personal == 3000
        assert summary.user_share_of_shared == 7000
        assert summary.partner_share_of_shared == 5000

    def test_user_and_partner_add_up_exactly(self, make_txn):
        transactions = [make_txn(f"t{i}", -(1001 + i * 37), "Groceries") for i in range(50)]
        config = make_config([("Groceries", True, 33)])

        summary = share_summary(transactions, config)

        assert summary.user_share_of_shared + summary.partner_share_of_shared == summary.total_shared

    def test_empty_summary(self):
        summary = share_summary([], make_config())

        assert summary.as_dict() == {
            "total_shared": 0,
            "total_personal": 0,
            "user_share_of_shared": 0,
            "partner_share_of_shared": 0,
        }


@pytest.mark.unit
class TestIncomeProportionalSplit:

    def test_zero_incomes_split_evenly(self):
        assert income_proportional_split(0, 0) == 50

    def test_proportional(self):
        assert income_proportional_split(600000, 400000) == 60

    def test_rounds_half_up(self):
        assert income_proportional_split(1, 7) == 13  # 12.5
        assert income_proportional_split(1, 2) == 33

    def test_one_sided_income(self):
        assert income_proportional_split(5000, 0) == 100
        assert income_proportional_split(0, 5000) == 0
