from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

import pandas as pd

from piggyback.domain.enums import TransactionStatus
from piggyback.domain.models import Transaction
from piggyback.logging_setup import get_logger
from piggyback.parsers.base import TransactionParser

logger = get_logger(__name__)


class CsvExportParser(TransactionParser):
    """
    Parser for the app's own CSV transaction export.

    Handles the export format with:
    - Dates written day first (31/01/2025)
    - Dollar amounts with sign, negative for spending
    - Category names rather than ids

    Exported rows carry no id, so ids are built from the file name and row number.
    """

    DATE_COL = "Date"
    DESCRIPTION_COL = "Description"
    AMOUNT_COL = "Amount"
    CATEGORY_COL = "Category"
    SUBCATEGORY_COL = "Subcategory"
    STATUS_COL = "Status"
    TYPE_COL = "Type"

    REQUIRED_COLUMNS = [DATE_COL, DESCRIPTION_COL, AMOUNT_COL]

    def validate_file(self, filepath):
        """Check the file exists, is a CSV, and has the required header."""
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(f"File does not exist on path {path}")

        if path.suffix.lower() != ".csv":
            raise ValueError(f"File must be .csv, got {path.suffix}")

        header = pd.read_csv(path, nrows=0)
        missing = [col for col in self.REQUIRED_COLUMNS if col not in header.columns]
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Available columns: {list(header.columns)}"
            )

    def parse(self, filepath: str) -> List[Transaction]:
        """Parse every row of the export, skipping rows that don't parse."""
        self.validate_file(filepath)

        path = Path(filepath)
        df = pd.read_csv(path, dtype=str, keep_default_na=False)

        transactions = []
        for index, row in df.iterrows():
            try:
                transactions.append(self._parse_row(row, f"{path.stem}-{index + 1}"))
            except (ValueError, InvalidOperation) as e:
                logger.warning("Skipping row %d: %s", index + 1, e)

        return transactions

    def _parse_row(self, row: pd.Series, transaction_id: str) -> Transaction:
        amount_cents = self._parse_amount(row[self.AMOUNT_COL])

        status = str(row.get(self.STATUS_COL, "")).strip().upper()

        return Transaction(
            id=transaction_id,
            description=str(row[self.DESCRIPTION_COL]).strip(),
            amount_cents=amount_cents,
            category_name=self._optional(row, self.CATEGORY_COL),
            transaction_type=self._optional(row, self.TYPE_COL),
            status=TransactionStatus(status) if status else TransactionStatus.SETTLED,
            created_at=datetime.strptime(str(row[self.DATE_COL]).strip(), "%d/%m/%Y"),
        )

    def _parse_amount(self, value) -> int:
        """Dollar string to whole cents, half-cents rounded away from zero."""
        amount = Decimal(str(value).replace("$", "").replace(",", "").strip())
        if not amount.is_finite():
            raise ValueError(f"Amount must be a finite number, got {value!r}")
        return int((amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))

    def _optional(self, row: pd.Series, column: str) -> Optional[str]:
        value = str(row.get(column, "")).strip()
        if not value or value == "Uncategorized":
            return None
        return value
