"""Structured context carried by cache, resolver and chat log events."""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Common fields merged into every event payload.

    ``credential`` must already be redacted (see ``redact_token``); the
    context never holds a raw token.
    """

    provider: Optional[str] = "copilot"
    model: Optional[str] = None
    cache_key: Optional[str] = None
    credential: Optional[str] = None
    item_index: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
