from abc import ABC, abstractmethod
from typing import List
from piggyback.domain.models import Transaction

class TransactionParser(ABC):
    """
    Abstract base class for all transaction source parsers.

    This implements the Strategy pattern - each data source gets its own
    concrete parser that turns loosely-typed provider data into Transactions
    before anything reaches the categorization or sharing code.
    """

    @abstractmethod
    def parse(self, filepath: str) -> List[Transaction]:
        """
        Parse a source file and return a list of transactions.

        Args:
            filepath: Path to the source file

        Returns:
            List of Transaction objects

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        pass

    @abstractmethod
    def validate_file(self, filepath: str):
        """
        Validate that the file matches the expected format.

        Args:
            filepath: Path to the source file

        Returns:
            Nothing if file is valid for this parser

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        pass
