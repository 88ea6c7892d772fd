"""Cost multiplier and billing tier helpers.

Live billing data (``billing.multiplier``, present with API version
2025-05-01) is authoritative. The id-pattern heuristics below only run when
the listing did not carry billing data.
"""

from __future__ import annotations

from typing import Literal

from ..models import ModelDescriptor

BillingTier = Literal["free", "economy", "standard", "premium", "ultra"]


def format_multiplier(value: float) -> str:
    """Render ``0.33`` as ``"0.33x"`` and ``1.0`` as ``"1x"``."""
    return f"{value:g}x"


def _heuristic_multiplier(model_id: str) -> float:
    mid = model_id.lower()
    if mid == "gpt-4.1" or mid.startswith("gpt-4.1-"):
        return 0
    if mid == "gpt-4o" or mid.startswith("gpt-4o-"):
        return 0
    if mid in ("gpt-4", "gpt-4-0613", "gpt-5-mini"):
        return 0
    if "grok" in mid and "fast" in mid:
        return 0
    if "oswe-vscode" in mid:
        return 0
    if "haiku" in mid or "flash" in mid or "codex-mini" in mid:
        return 0.33
    if mid in ("claude-opus-41", "claude-opus-4.1"):
        return 10
    if "opus" in mid:
        return 3
    return 1


def multiplier_value(model: ModelDescriptor) -> float:
    """Numeric multiplier: billing data when present, else the heuristic."""
    if model.billing is not None:
        return float(model.billing.multiplier)
    return float(_heuristic_multiplier(model.id))


def cost_multiplier(model: ModelDescriptor) -> str:
    """Display form of the cost multiplier (``"0x"``, ``"0.33x"``, ``"10x"``)."""
    return format_multiplier(multiplier_value(model))


def billing_tier(multiplier: float) -> BillingTier:
    """Map a numeric multiplier onto a named tier."""
    if multiplier <= 0:
        return "free"
    if multiplier < 1:
        return "economy"
    if multiplier == 1:
        return "standard"
    if multiplier <= 3:
        return "premium"
    return "ultra"


__all__ = [
    "BillingTier",
    "format_multiplier",
    "multiplier_value",
    "cost_multiplier",
    "billing_tier",
]
