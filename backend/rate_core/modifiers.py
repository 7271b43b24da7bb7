"""
rate_core/modifiers.py

Modifier application - the leaf of rate resolution.
"""
from decimal import Decimal
from typing import Callable, Dict

from rate_core.models import ModifierKind, RateModifier

HUNDRED = Decimal("100")


def _apply_percentage(modifier: RateModifier, running: Decimal, base_rate: Decimal) -> Decimal:
    basis = base_rate if modifier.apply_to_base_rate else running
    return running + basis * (modifier.value / HUNDRED)


def _apply_fixed_amount(modifier: RateModifier, running: Decimal, base_rate: Decimal) -> Decimal:
    return running + modifier.value


def _apply_override(modifier: RateModifier, running: Decimal, base_rate: Decimal) -> Decimal:
    return modifier.value


MODIFIER_APPLIERS: Dict[ModifierKind, Callable[[RateModifier, Decimal, Decimal], Decimal]] = {
    ModifierKind.PERCENTAGE: _apply_percentage,
    ModifierKind.FIXED_AMOUNT: _apply_fixed_amount,
    ModifierKind.OVERRIDE: _apply_override,
}


def apply_modifier(modifier: RateModifier, running: Decimal, base_rate: Decimal) -> Decimal:
    """
    Apply one modifier to the running nightly value.

    Args:
        modifier: Modifier to apply
        running: Value after the previously applied modifiers
        base_rate: The plan's base rate

    Returns:
        The new running value
    """
    return MODIFIER_APPLIERS[modifier.kind](modifier, running, base_rate)


def is_supported(modifier: RateModifier) -> bool:
    """Check whether the modifier kind has an applier."""
    return modifier.kind in MODIFIER_APPLIERS


__all__ = [
    "MODIFIER_APPLIERS",
    "apply_modifier",
    "is_supported",
]
