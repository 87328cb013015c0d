"""Documents stored in and returned from vector stores."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class Document:
    """Text content with arbitrary metadata."""

    page_content: str
    metadata: dict[str, Any] = field(default_factory=dict)


__all__ = ["Document"]
