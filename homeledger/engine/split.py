from decimal import Decimal
from typing import Mapping, NamedTuple, Optional

from homeledger.utils.validation import validate_split_percentage

DEFAULT_SPLIT_PERCENTAGE = Decimal("50")
HUNDRED = Decimal("100")


class SplitShares(NamedTuple):
    user_a: Decimal
    user_b: Decimal


def resolve_split_percentage(
    explicit: Optional[Decimal],
    category_default: Optional[Decimal] = None
) -> Decimal:
    """Explicit split, else the category default, else 50."""
    if explicit is not None:
        return explicit
    if category_default is not None:
        return category_default
    return DEFAULT_SPLIT_PERCENTAGE


def resolve_for_category(
    explicit: Optional[Decimal],
    category_id: Optional[str],
    category_defaults: Mapping[str, Decimal]
) -> Decimal:
    default = category_defaults.get(category_id) if category_id else None
    return resolve_split_percentage(explicit, default)


def split(reference_amount: Decimal, split_percentage: Decimal) -> SplitShares:
    """
    Divide an amount between the two primary users.

    User B's share is the remainder, so the two shares always add back up
    to ``reference_amount`` exactly.
    """
    validate_split_percentage(split_percentage)
    user_a = reference_amount * split_percentage / HUNDRED
    return SplitShares(user_a=user_a, user_b=reference_amount - user_a)
