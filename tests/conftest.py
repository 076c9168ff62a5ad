"""Shared pytest fixtures for UserScout tests."""

from collections.abc import Callable
from typing import Any

import pytest

from userscout.config import reset_settings
from userscout.models import RawSignal, SignalSource


@pytest.fixture
def make_signal() -> Callable[..., RawSignal]:
    """Factory for RawSignal with sensible defaults."""
    counter = {"n": 0}

    def _make(source: SignalSource | str = SignalSource.G2_REVIEW, **kwargs: Any) -> RawSignal:
        counter["n"] += 1
        kwargs.setdefault("source_url", f"https://example.com/evidence/{counter['n']}")
        kwargs.setdefault("signal_text", f"evidence {counter['n']}")
        return RawSignal(source=source, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def fresh_settings():
    """Ensure each test loads its own Settings."""
    reset_settings()
    yield
    reset_settings()
