import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from piggyback.domain.models import CategoryOverride, MerchantRule
from piggyback.sharing.models import ShareConfig, build_share_config

@dataclass
class Snapshot:
    """
    The user's stored choices, loaded once before a pass.

    Mirrors the rows a sync or budget view reads up front: category
    overrides, merchant rules and the share configuration, plus the display
    names of provider category ids.
    """
    overrides: List[CategoryOverride] = field(default_factory=list)
    merchant_rules: List[MerchantRule] = field(default_factory=list)
    share_config: ShareConfig = field(default_factory=ShareConfig)
    category_names: Dict[str, str] = field(default_factory=dict)


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    """
    Build a Snapshot from row dicts.

    Raises:
        ValueError: If a row is missing a required field
        InvalidShareConfigError: If a share percentage is out of range
    """
    try:
        overrides = [
            CategoryOverride(
                transaction_id=row["transaction_id"],
                category_id=row.get("category_id"),
                parent_category_id=row.get("parent_category_id"),
                original_category_id=row.get("original_category_id"),
                original_parent_category_id=row.get("original_parent_category_id"),
                notes=row.get("notes"),
            )
            for row in data.get("category_overrides", [])
        ]
        merchant_rules = [
            MerchantRule(
                merchant_description=row["merchant_description"],
                category_id=row["category_id"],
                parent_category_id=row.get("parent_category_id"),
            )
            for row in data.get("merchant_rules", [])
        ]
    except KeyError as e:
        raise ValueError(f"Snapshot row is missing field {e}") from e

    category_names = data.get("category_names") or {}
    if not isinstance(category_names, dict):
        raise ValueError("category_names must be an object of category id -> name")

    share_config = build_share_config(
        data.get("category_shares", []),
        data.get("transaction_share_overrides", []),
    )

    return Snapshot(
        overrides=overrides,
        merchant_rules=merchant_rules,
        share_config=share_config,
        category_names={str(k): str(v) for k, v in category_names.items()},
    )


def load_snapshot(path: Union[Path, str]) -> Snapshot:
    """
    Load a snapshot JSON file.

    Args:
        path: File with `category_overrides`, `merchant_rules`,
            `category_shares` and `transaction_share_overrides` lists and a
            `category_names` object (all optional)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't a valid snapshot
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file does not exist on path {path}")

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a JSON object")

    return snapshot_from_dict(data)
