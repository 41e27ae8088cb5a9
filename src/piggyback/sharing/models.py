"""
Share configuration - how spending is split between partners.

A ShareConfig is built fresh for each request or batch from persisted rows and
is validated on construction, so the calculation functions can trust it.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from numbers import Real
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Union

Percentage = Union[int, float, Decimal]


class InvalidShareConfigError(ValueError):
    """Raised when a share row has a bad is_shared flag or a percentage outside 0-100."""
    pass


def _validate_shared_flag(value: Any, owner: str) -> None:
    if not isinstance(value, bool):
        raise InvalidShareConfigError(
            f"is_shared for {owner} must be true or false, got {value!r}"
        )


def _validate_percentage(value: Any, owner: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidShareConfigError(
            f"Share percentage for {owner} must be a number, got {value!r}"
        )
    if isinstance(value, Decimal) and value.is_nan():
        raise InvalidShareConfigError(
            f"Share percentage for {owner} must be a number, got {value}"
        )
    if not 0 <= value <= 100:
        raise InvalidShareConfigError(
            f"Share percentage for {owner} must be between 0 and 100, got {value}"
        )


@dataclass(frozen=True)
class CategoryShareConfig:
    """Category-level default: is it shared, and what percentage is the user's"""
    category_name: str
    is_shared: bool
    share_percentage: Percentage = 100

    def __post_init__(self):
        _validate_shared_flag(self.is_shared, f"category '{self.category_name}'")
        _validate_percentage(self.share_percentage, f"category '{self.category_name}'")


@dataclass(frozen=True)
class TransactionShareOverride:
    """Per-transaction share setting, beats the category default"""
    transaction_id: str
    is_shared: bool
    share_percentage: Percentage = 100

    def __post_init__(self):
        _validate_shared_flag(self.is_shared, f"transaction '{self.transaction_id}'")
        _validate_percentage(self.share_percentage, f"transaction '{self.transaction_id}'")


@dataclass(frozen=True)
class ShareConfig:
    """Snapshot of both share mappings, keyed for lookup during a pass"""
    category_shares: Mapping[str, CategoryShareConfig] = field(
        default_factory=lambda: MappingProxyType({})
    )
    transaction_overrides: Mapping[str, TransactionShareOverride] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_entries(
        cls,
        category_shares: Iterable[CategoryShareConfig] = (),
        transaction_overrides: Iterable[TransactionShareOverride] = (),
    ) -> "ShareConfig":
        return cls(
            category_shares=MappingProxyType({c.category_name: c for c in category_shares}),
            transaction_overrides=MappingProxyType({o.transaction_id: o for o in transaction_overrides}),
        )


@dataclass(frozen=True)
class ShareSummary:
    """
    Totals (positive magnitudes, cents) of shared vs personal spending.

    partner_share_of_shared is derived from the other two so that
    user + partner always equals total_shared exactly.
    """
    total_shared: int
    total_personal: int
    user_share_of_shared: int

    @property
    def partner_share_of_shared(self) -> int:
        return self.total_shared - self.user_share_of_shared

    def as_dict(self) -> Dict[str, int]:
        return {
            "total_shared": self.total_shared,
            "total_personal": self.total_personal,
            "user_share_of_shared": self.user_share_of_shared,
            "partner_share_of_shared": self.partner_share_of_shared,
        }


def build_share_config(
    category_rows: Iterable[Dict[str, Any]] = (),
    override_rows: Iterable[Dict[str, Any]] = (),
) -> ShareConfig:
    """
    Build a validated ShareConfig from persisted rows.

    Args:
        category_rows: Dicts with category_name, is_shared, share_percentage
        override_rows: Dicts with transaction_id, is_shared, share_percentage

    Raises:
        InvalidShareConfigError: If a row is missing a field, has a non-boolean
            is_shared or an out-of-range percentage

    Returns:
        ShareConfig ready for the calculation functions
    """
    try:
        categories = [
            CategoryShareConfig(
                category_name=row["category_name"],
                is_shared=row["is_shared"],
                share_percentage=row.get("share_percentage", 100),
            )
            for row in category_rows
        ]
        overrides = [
            TransactionShareOverride(
                transaction_id=row["transaction_id"],
                is_shared=row["is_shared"],
                share_percentage=row.get("share_percentage", 100),
            )
            for row in override_rows
        ]
    except KeyError as e:
        raise InvalidShareConfigError(f"Share row is missing field {e}") from e

    return ShareConfig.from_entries(categories, overrides)
