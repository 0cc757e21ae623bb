"""Display helpers shared by the API payloads and the report generator."""

from __future__ import annotations


def _plain_number(amount: float) -> str:
    if float(amount).is_integer():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}".rstrip("0").rstrip(".")


def format_currency(amount: float) -> str:
    """Compact dollar string: ``$1.5B``, ``$1.5M``, ``$950K`` or ``$950``."""

    if amount >= 1_000_000_000:
        return f"${amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"${amount / 1_000:.0f}K"
    return f"${_plain_number(amount)}"


def format_percentage(value: float) -> str:
    """Fractional value as a one-decimal percentage, e.g. ``0.055 -> 5.5%``."""

    return f"{value * 100:.1f}%"


def format_number(amount: float) -> str:
    """Thousands-separated number without a currency sign."""

    return _plain_number(amount)


__all__ = ["format_currency", "format_percentage", "format_number"]
