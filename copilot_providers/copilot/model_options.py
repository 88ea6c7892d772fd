"""Model picker entries built from a cached model listing.

Entry format (VS Code style)::

    name:        "GPT-4o • 0x - Versatile [Streaming • Tools • Vision]"
    value:       "gpt-4o"
    description: "Context: 128k • Output: 16k • Provider: Azure OpenAI"

``ID: <id>`` is prepended to the description only when several models share
a display name.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..base.capabilities import cost_multiplier
from ..base.dto import MANUAL_MODEL_MARKER
from ..base.models import ModelDescriptor

ModelOption = Dict[str, str]

MANUAL_OPTION: ModelOption = {
    "name": "Enter Custom Model Name",
    "value": MANUAL_MODEL_MARKER,
    "description": "Type a model id that is not listed",
}


def capability_badges(model: ModelDescriptor) -> List[str]:
    caps = model.capabilities
    badges = []
    if caps.supports_streaming:
        badges.append("Streaming")
    if caps.supports_tool_calls:
        badges.append("Tools")
    if caps.supports_vision:
        badges.append("Vision")
    if caps.supports_structured_outputs:
        badges.append("Structured")
    if caps.supports_parallel_tool_calls:
        badges.append("Parallel")
    if caps.supports_reasoning:
        badges.append("Reasoning")
    return badges


def _thousands(value: int) -> str:
    return f"{int(value / 1000 + 0.5)}k"


def _description(model: ModelDescriptor, duplicated: bool) -> Optional[str]:
    parts = []
    if duplicated:
        parts.append(f"ID: {model.id}")
    caps = model.capabilities
    if caps.max_context_tokens:
        parts.append(f"Context: {_thousands(caps.max_context_tokens)}")
    if caps.max_output_tokens:
        parts.append(f"Output: {_thousands(caps.max_output_tokens)}")
    if model.vendor:
        parts.append(f"Provider: {model.vendor}")
    return " • ".join(parts) or None


def model_option(model: ModelDescriptor, *, duplicated: bool = False) -> ModelOption:
    category = model.picker_category or ""
    category_label = f" - {category[:1].upper()}{category[1:]}" if category else ""
    badges = capability_badges(model)
    badges_text = f" [{' • '.join(badges)}]" if badges else ""
    option: ModelOption = {
        "name": f"{model.label} • {cost_multiplier(model)}{category_label}{badges_text}",
        "value": model.id,
    }
    description = _description(model, duplicated)
    if description:
        option["description"] = description
    return option


def models_to_options(models: Sequence[ModelDescriptor]) -> List[ModelOption]:
    """Convert descriptors into picker options, keeping listing order."""
    counts = Counter(m.label for m in models)
    return [model_option(m, duplicated=counts[m.label] > 1) for m in models]


def filter_models_by_type(models: Sequence[ModelDescriptor], model_type: str) -> List[ModelDescriptor]:
    """Keep models whose ``capabilities.type`` equals ``model_type`` (e.g. ``chat``)."""
    return [m for m in models if m.capabilities.type == model_type]


def vision_model_options(models: Sequence[ModelDescriptor]) -> List[ModelOption]:
    """Options for vision-capable models followed by the manual entry option."""
    options = models_to_options([m for m in models if m.capabilities.supports_vision])
    options.append(dict(MANUAL_OPTION))
    return options


__all__ = [
    "ModelOption",
    "MANUAL_OPTION",
    "capability_badges",
    "model_option",
    "models_to_options",
    "filter_models_by_type",
    "vision_model_options",
]
