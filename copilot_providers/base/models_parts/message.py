"""
Chat message DTO.

``Message.content`` is either :class:`PlainText` or :class:`StructuredParts`.
Raw dictionaries from callers are normalized exactly once via
:meth:`Message.from_wire`; :meth:`Message.to_wire` produces the upstream
OpenAI-compatible shape.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from .content_part import ContentPart, TextPart, part_from_wire

Role = Literal["system", "user", "assistant", "tool"]

VALID_ROLES = ("system", "user", "assistant", "tool")


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class StructuredParts:
    parts: Tuple[ContentPart, ...]


MessageContent = Union[PlainText, StructuredParts]


@dataclass
class Message:
    """One chat turn.

    Attributes:
        role: Author role.
        content: Tagged content variant.
        type: Optional message-level discriminator used by legacy callers
            (``"file"`` marks an attached image carried as a data URL).
        extra: Other wire keys (``name``, ``tool_call_id``, ``tool_calls``)
            forwarded untouched.
    """

    role: Role
    content: MessageContent
    type: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None

    @classmethod
    def text(cls, role: Role, text: str) -> "Message":
        return cls(role=role, content=PlainText(text))

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "Message":
        """Normalize a wire dictionary into a :class:`Message`.

        Dictionary content (not a parts array) is serialized as indented JSON
        text; ``None`` content becomes empty text.
        """
        role = data.get("role") or "user"
        raw = data.get("content")
        content: MessageContent
        if isinstance(raw, list):
            content = StructuredParts(tuple(part_from_wire(p) for p in raw))
        elif isinstance(raw, dict):
            content = PlainText(json.dumps(raw, indent=2, ensure_ascii=False))
        elif raw is None:
            content = PlainText("")
        else:
            content = PlainText(str(raw))
        mtype = data.get("type")
        extra = {k: v for k, v in data.items() if k not in ("role", "content", "type")}
        return cls(
            role=role,
            content=content,
            type=mtype if isinstance(mtype, str) else None,
            extra=extra or None,
        )

    def is_structured(self) -> bool:
        return isinstance(self.content, StructuredParts)

    def texts(self) -> List[str]:
        """Return every text payload carried by the message."""
        if isinstance(self.content, PlainText):
            return [self.content.text]
        return [p.text for p in self.content.parts if isinstance(p, TextPart)]

    def to_wire(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"role": self.role}
        if isinstance(self.content, PlainText):
            out["content"] = self.content.text
        else:
            out["content"] = [p.to_wire() for p in self.content.parts]
        if self.type:
            out["type"] = self.type
        if self.extra:
            for k, v in self.extra.items():
                out.setdefault(k, v)
        return out


__all__ = [
    "Role",
    "VALID_ROLES",
    "PlainText",
    "StructuredParts",
    "MessageContent",
    "Message",
]
