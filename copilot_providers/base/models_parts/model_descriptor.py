"""
Model descriptor DTOs for Copilot model listings.

A :class:`ModelDescriptor` is one entry of the ``GET /models`` ``data`` array
after normalization. Optional upstream fields (billing, picker category,
limits) are modelled as ``None`` when absent; consumers fall back to
heuristics instead of failing.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional


@dataclass
class CapabilitySet:
    """Declared capabilities of a model.

    Attributes:
        supports_vision: Image input accepted (``supports.vision`` or a
            ``limits.vision`` block).
        supports_tool_calls: Function/tool calling.
        supports_streaming: Server-sent streaming responses.
        supports_structured_outputs: JSON schema constrained outputs.
        supports_parallel_tool_calls: Several tool calls in one turn.
        supports_reasoning: Model advertises a thinking budget.
        max_context_tokens: Context window size, when declared.
        max_output_tokens: Output cap, when declared.
        type: Capability family (``chat``, ``embeddings``, ...).
        family: Model family string from the listing.
    """

    supports_vision: bool = False
    supports_tool_calls: bool = False
    supports_streaming: bool = False
    supports_structured_outputs: bool = False
    supports_parallel_tool_calls: bool = False
    supports_reasoning: bool = False
    max_context_tokens: Optional[int] = None
    max_output_tokens: Optional[int] = None
    type: Optional[str] = None
    family: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BillingInfo:
    """Billing block returned with ``X-GitHub-Api-Version: 2025-05-01``."""

    multiplier: float
    is_premium: bool = False
    restricted_to: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ModelDescriptor:
    """A single model advertised to the authenticated principal.

    ``id`` is unique within one listing, but display names may repeat across
    vendors; picker code disambiguates by id when they do.

    Attributes:
        id: Upstream model identifier.
        name: Upstream ``name`` (falls back to ``id``).
        display_name: Optional UI label.
        vendor: Model vendor (``OpenAI``, ``Anthropic``, ...).
        version: Optional version string.
        capabilities: Normalized :class:`CapabilitySet`.
        billing: :class:`BillingInfo` when the listing carried it.
        picker_enabled: Whether the model is shown in the upstream picker.
        picker_category: ``lightweight`` / ``versatile`` / ``powerful`` / other.
        preview: Preview flag.
        raw: The untouched listing entry.
    """

    id: str
    name: str
    display_name: Optional[str] = None
    vendor: Optional[str] = None
    version: Optional[str] = None
    capabilities: CapabilitySet = field(default_factory=CapabilitySet)
    billing: Optional[BillingInfo] = None
    picker_enabled: bool = False
    picker_category: Optional[str] = None
    preview: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Return the human label: display name, then name, then id."""
        return self.display_name or self.name or self.id

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the entry."""
        return asdict(self)


__all__ = ["CapabilitySet", "BillingInfo", "ModelDescriptor"]
