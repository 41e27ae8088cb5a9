from enum import Enum

class TransactionStatus(Enum):
    """Settlement state reported by the bank"""
    HELD = "HELD"
    SETTLED = "SETTLED"


class BudgetView(Enum):
    """Which budget a total is reported for"""
    MY = "my" # personal responsibility
    OUR = "our" # full shared household amounts


class AssignmentSource(Enum):
    """Which layer decided a transaction's category"""
    OVERRIDE = "override"
    MERCHANT_RULE = "merchant_rule"
    INFERRED = "inferred"
