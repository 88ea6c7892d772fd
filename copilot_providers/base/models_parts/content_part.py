"""
Content parts of a structured chat message.

``ContentPart`` is a tagged union of :class:`TextPart`, :class:`ImageRefPart`
and :class:`RawPart`. Wire dictionaries are classified once with
:func:`part_from_wire`; downstream code dispatches on the part class rather
than inspecting dictionary shapes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class TextPart:
    """Plain text part (``{"type": "text", "text": ...}``)."""

    text: str

    def to_wire(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ImageRefPart:
    """Image reference: an ``https://`` URL or a ``data:image/...`` URL.

    ``source`` keeps the original wire dictionary so the part is forwarded
    upstream unchanged.
    """

    url: str
    detail: Optional[str] = None
    source: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_wire(self) -> Dict[str, Any]:
        if self.source:
            return dict(self.source)
        image_url: Dict[str, Any] = {"url": self.url}
        if self.detail:
            image_url["detail"] = self.detail
        return {"type": "image_url", "image_url": image_url}


@dataclass(frozen=True)
class RawPart:
    """Any other part type, forwarded verbatim."""

    type: Optional[str]
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_wire(self) -> Dict[str, Any]:
        return dict(self.data)


ContentPart = Union[TextPart, ImageRefPart, RawPart]

IMAGE_PART_TYPES = frozenset({"image_url", "image"})


def _image_url_of(d: Dict[str, Any]) -> tuple[str, Optional[str]]:
    ref = d.get("image_url")
    if isinstance(ref, dict):
        return str(ref.get("url") or ""), ref.get("detail")
    if isinstance(ref, str):
        return ref, None
    for key in ("url", "data", "source"):
        val = d.get(key)
        if isinstance(val, str):
            return val, None
    return "", None


def part_from_wire(item: Any) -> ContentPart:
    """Classify one element of a ``content`` array.

    Image parts are recognized by ``type`` (``image_url``/``image``) or by
    the mere presence of an ``image_url`` key. Bare strings become text.
    """
    if isinstance(item, str):
        return TextPart(item)
    if not isinstance(item, dict):
        return RawPart(type=None, data={"value": item})
    ptype = item.get("type")
    if ptype in IMAGE_PART_TYPES or "image_url" in item:
        url, detail = _image_url_of(item)
        return ImageRefPart(url=url, detail=detail, source=dict(item))
    if ptype == "text" and isinstance(item.get("text"), str):
        return TextPart(item["text"])
    return RawPart(type=ptype if isinstance(ptype, str) else None, data=dict(item))


__all__ = [
    "TextPart",
    "ImageRefPart",
    "RawPart",
    "ContentPart",
    "IMAGE_PART_TYPES",
    "part_from_wire",
]
