"""Vision detection and fallback model resolution.

``requires_vision`` decides whether a message list carries image content.
``VisionFallbackResolver`` then checks the selected model's vision support
(live cache first, bundled table second) and either keeps the model,
substitutes the configured fallback, or raises ``VisionUnsupportedError``.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from ..base.capabilities import CAP_VISION, static_capability
from ..base.dto import VisionPolicy
from ..base.errors import VisionUnsupportedError
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ImageRefPart, Message, StructuredParts
from ..base.repositories.model_cache import CapabilityCache
from ..config.defaults import VISION_BASE64_MIN_CHARS

# Message-level ``type`` values that mark the message itself as an image.
VISION_MESSAGE_TYPES = frozenset({"file", "image", "image_url"})

_DATA_URL_PREFIX = re.compile(r"data:image/[A-Za-z0-9.+-]+;base64,")
_BASE64_RUN = re.compile(r"[A-Za-z0-9+/]*={0,2}")


def contains_image_data_url(text: str, min_chars: int = VISION_BASE64_MIN_CHARS) -> bool:
    """True when ``text`` holds a ``data:image/...;base64,`` URL with at least
    ``min_chars`` characters of base64 payload.

    Short payloads and plain mentions of "image" do not count.
    """
    if not text or "data:image/" not in text:
        return False
    for match in _DATA_URL_PREFIX.finditer(text):
        run = _BASE64_RUN.match(text, match.end())
        if run is not None and len(run.group(0)) >= min_chars:
            return True
    return False


def message_requires_vision(message: Message, min_chars: int = VISION_BASE64_MIN_CHARS) -> bool:
    if message.type in VISION_MESSAGE_TYPES:
        return True
    if isinstance(message.content, StructuredParts):
        if any(isinstance(p, ImageRefPart) for p in message.content.parts):
            return True
    return any(contains_image_data_url(t, min_chars) for t in message.texts())


def requires_vision(messages: Iterable[Message], min_chars: int = VISION_BASE64_MIN_CHARS) -> bool:
    """Return True if any message carries image content.

    A message counts when it has a structured image part, a message-level
    ``type`` of ``file``/``image``/``image_url``, or text containing a base64
    image data URL of at least ``min_chars`` encoded characters.
    """
    return any(message_requires_vision(m, min_chars) for m in messages)


class VisionFallbackResolver:
    """Pick the model that will actually receive a (possibly multimodal) request.

    Parameters:
        cache: Capability cache consulted first (cached data only, no fetch).
        min_base64_chars: Data URL payload threshold for text detection.
        logger: Optional logger; defaults to ``copilot.vision``.
    """

    def __init__(
        self,
        cache: CapabilityCache,
        *,
        min_base64_chars: int = VISION_BASE64_MIN_CHARS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._cache = cache
        self._min_chars = min_base64_chars
        self._logger = logger or get_logger("copilot.vision")

    def requires_vision(self, messages: Iterable[Message]) -> bool:
        return requires_vision(messages, self._min_chars)

    def supports_vision(self, credential: str, model_id: str) -> bool:
        """Two-tier lookup: live cache, then the bundled table.

        A model unknown to both is treated as not vision-capable.
        """
        live = self._cache.lookup_capability(credential, model_id, CAP_VISION)
        source = "cache"
        answer = live
        if answer is None:
            answer = static_capability(model_id, CAP_VISION)
            source = "static" if answer is not None else "none"
        log_event(
            self._logger,
            "vision.check",
            LogContext(model=model_id),
            source=source,
            supports_vision=bool(answer),
        )
        return bool(answer)

    def resolve_model(
        self,
        requested_model: str,
        messages: Iterable[Message],
        credential: str,
        policy: Optional[VisionPolicy] = None,
    ) -> str:
        """Return the model id to send the request to.

        Raises:
            VisionUnsupportedError: the messages need vision, the model lacks
                it, and no usable fallback is configured.
        """
        if not self.requires_vision(list(messages)):
            return requested_model
        if self.supports_vision(credential, requested_model):
            return requested_model
        policy = policy or VisionPolicy()
        if not policy.enabled:
            raise VisionUnsupportedError(requested_model)
        fallback = policy.resolved_fallback()
        if fallback is None:
            raise VisionUnsupportedError(
                requested_model,
                f"Model {requested_model} does not support vision and vision fallback is enabled "
                "but no fallback model was selected or provided. "
                "Please select a vision-capable model in Advanced Options.",
            )
        log_event(
            self._logger,
            "vision.fallback",
            LogContext(model=requested_model),
            fallback_model=fallback,
        )
        return fallback


__all__ = [
    "VISION_MESSAGE_TYPES",
    "contains_image_data_url",
    "message_requires_vision",
    "requires_vision",
    "VisionFallbackResolver",
]
