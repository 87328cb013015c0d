from __future__ import annotations

from collections.abc import Iterator
import os
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from llmkit.config import load_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from cached settings and ambient ``LLMKIT_`` variables."""

    for name in list(os.environ):
        if name.lower().startswith("llmkit_"):
            monkeypatch.delenv(name)
    load_settings.cache_clear()
    try:
        yield
    finally:
        load_settings.cache_clear()
