"""Ledger validation utilities."""
from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    """Base class for ledger computation errors."""
    pass


class LedgerValidationError(LedgerError):
    """Bad input reached a ledger operation."""
    pass


class ConfigurationError(LedgerError):
    """A record or setting the engine depends on is unusable (e.g. exchange rate)."""
    pass


def validate_split_percentage(percentage: Decimal) -> None:
    """
    Validate a resolved split percentage.

    Rules:
    - must be present (fallback resolution happens before this)
    - must be within 0..100 inclusive
    """
    if percentage is None:
        raise LedgerValidationError("Split percentage must be resolved before splitting")
    if percentage < 0 or percentage > 100:
        raise LedgerValidationError(
            f"Split percentage must be between 0 and 100, got {percentage}"
        )


def validate_exchange_rate(exchange_rate: Optional[Decimal], currency: str) -> Decimal:
    """Return the rate, or raise if it is missing or non-positive."""
    if exchange_rate is None or exchange_rate <= 0:
        raise ConfigurationError(
            f"Exchange rate for {currency} must be a positive number, got {exchange_rate}"
        )
    return exchange_rate


def validate_installment_count(count: int) -> None:
    if count < 1:
        raise LedgerValidationError(f"Installment count must be at least 1, got {count}")
