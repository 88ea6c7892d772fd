"""Parsing helpers turning a ``GET /models`` payload into descriptors.

Listing payloads are loosely typed; every optional field degrades to a
default instead of raising. Entries without a usable id are skipped and
the provider order is preserved.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ...models import BillingInfo, CapabilitySet, ModelDescriptor


def iso_from_epoch(ts: float) -> str:
    """Render an epoch timestamp as ISO-8601 UTC with millisecond precision."""
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extract_meta_and_raw(data: Any) -> Tuple[Dict[str, Any], List[Any]]:
    """Split a listing payload into metadata and raw model entries.

    Accepts ``{"data": [...]}`` (the Copilot shape), ``{"models": [...]}``
    or a bare list.
    """
    meta: Dict[str, Any] = {}
    raw: List[Any] = []
    if isinstance(data, dict):
        for k in ("object", "fetched_at", "metadata"):
            if k in data:
                meta[k] = data[k]
        if isinstance(data.get("data"), list):
            raw = data["data"]
        elif isinstance(data.get("models"), list):
            raw = data["models"]
    elif isinstance(data, list):
        raw = data
    return meta, raw


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return None


def _capabilities_from_dict(caps: Any) -> CapabilitySet:
    """Normalize the ``capabilities`` block (``supports`` + ``limits``)."""
    if not isinstance(caps, dict):
        return CapabilitySet()
    supports = caps.get("supports") if isinstance(caps.get("supports"), dict) else {}
    limits = caps.get("limits") if isinstance(caps.get("limits"), dict) else {}
    ctype = caps.get("type")
    family = caps.get("family")
    return CapabilitySet(
        supports_vision=supports.get("vision") is True or bool(limits.get("vision")),
        supports_tool_calls=supports.get("tool_calls") is True,
        supports_streaming=supports.get("streaming") is True,
        supports_structured_outputs=supports.get("structured_outputs") is True,
        supports_parallel_tool_calls=supports.get("parallel_tool_calls") is True,
        supports_reasoning=bool(supports.get("max_thinking_budget")),
        max_context_tokens=_as_int(limits.get("max_context_window_tokens")),
        max_output_tokens=_as_int(limits.get("max_output_tokens")),
        type=ctype if isinstance(ctype, str) else None,
        family=family if isinstance(family, str) else None,
    )


def _billing_from_dict(billing: Any) -> Optional[BillingInfo]:
    if not isinstance(billing, dict):
        return None
    mult = billing.get("multiplier")
    if isinstance(mult, bool) or not isinstance(mult, (int, float)):
        return None
    restricted = billing.get("restricted_to")
    return BillingInfo(
        multiplier=float(mult),
        is_premium=billing.get("is_premium") is True,
        restricted_to=[str(r) for r in restricted] if isinstance(restricted, list) else [],
    )


def _opt_str(d: Dict[str, Any], key: str) -> Optional[str]:
    val = d.get(key)
    return val if isinstance(val, str) and val else None


def model_from_dict(d: Dict[str, Any]) -> Optional[ModelDescriptor]:
    """Create a :class:`ModelDescriptor` from one listing entry.

    Returns ``None`` when the entry has no string id.
    """
    mid = d.get("id")
    if not isinstance(mid, str) or not mid:
        return None
    return ModelDescriptor(
        id=mid,
        name=_opt_str(d, "name") or mid,
        display_name=_opt_str(d, "display_name"),
        vendor=_opt_str(d, "vendor"),
        version=_opt_str(d, "version"),
        capabilities=_capabilities_from_dict(d.get("capabilities")),
        billing=_billing_from_dict(d.get("billing")),
        picker_enabled=d.get("model_picker_enabled") is True,
        picker_category=_opt_str(d, "model_picker_category"),
        preview=d.get("preview") is True,
        raw=dict(d),
    )


def descriptors_from_listing(payload: Any) -> List[ModelDescriptor]:
    """Normalize a full listing payload, keeping upstream order."""
    _, raw = extract_meta_and_raw(payload)
    out: List[ModelDescriptor] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        model = model_from_dict(item)
        if model is not None:
            out.append(model)
    return out


__all__ = [
    "iso_from_epoch",
    "extract_meta_and_raw",
    "model_from_dict",
    "descriptors_from_listing",
]
