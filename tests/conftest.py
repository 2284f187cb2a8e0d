"""
Shared fixtures and collection settings.

- Test environment variables are set automatically for every test (autouse)
- The project root is added to ``sys.path`` so ``import pomocal`` resolves
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from pomocal.config import clear_settings_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Set dummy environment values for each test; monkeypatch restores them."""

    env: dict[str, str] = {
        "GOOGLE_CLIENT_ID": "test-client-id",
        "GOOGLE_CLIENT_SECRET": "test-client-secret",
        "GOOGLE_REDIRECT_URI": "http://localhost:8000/api/oauth2callback",
        "GOOGLE_TOKEN_PATH": str(tmp_path / "tokens.json"),
        "LOG_DIR": str(tmp_path / "logs"),
        "SESSION_SECRET": "test-session-secret",
        "ENVIRONMENT": "testing",
    }

    for k, v in env.items():
        monkeypatch.setenv(k, v)

    clear_settings_cache()
    yield
    clear_settings_cache()
