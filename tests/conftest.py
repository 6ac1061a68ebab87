"""Pytest configuration and fixtures.

Provides environment isolation and the call-recording fixture. The
isolation fixtures are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import os

import pytest

from tests.helpers import Recorder

# =============================================================================
# Test Doubles
# =============================================================================


@pytest.fixture
def recorder() -> Recorder:
    """Return a fresh Recorder that returns None."""
    return Recorder()


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_resultar_env(request, monkeypatch):
    """Clear RESULTAR_* env vars so diagnostics use their defaults.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("RESULTAR_"):
            monkeypatch.delenv(key, raising=False)
