"""
Domain models (DTOs) public surface.

Re-exports the one-class-per-file implementations under
``copilot_providers.base.models_parts``.
"""

from .models_parts.model_descriptor import BillingInfo, CapabilitySet, ModelDescriptor
from .models_parts.content_part import (
    ContentPart,
    ImageRefPart,
    RawPart,
    TextPart,
    part_from_wire,
)
from .models_parts.message import Message, MessageContent, PlainText, Role, StructuredParts
from .models_parts.cache_info import CacheInfo, ModelCapabilitiesSummary

__all__ = [
    "BillingInfo",
    "CapabilitySet",
    "ModelDescriptor",
    "ContentPart",
    "ImageRefPart",
    "RawPart",
    "TextPart",
    "part_from_wire",
    "Message",
    "MessageContent",
    "PlainText",
    "Role",
    "StructuredParts",
    "CacheInfo",
    "ModelCapabilitiesSummary",
]
