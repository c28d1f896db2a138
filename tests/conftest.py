"""Pytest configuration.

``src/`` is not on ``sys.path`` unless the package is installed; inserting it
here lets the suite run straight from a checkout.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest

src_root = Path(__file__).resolve().parents[1] / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from meteofetch.adapters.http_client import build_client  # noqa: E402
from meteofetch.core.config import AppSettings  # noqa: E402


class MockApi:
    """Stand-in for the Meteomatics endpoint backed by ``httpx.MockTransport``."""

    def __init__(self):
        self.requests = []
        self.clients = []
        self.status_code = 200
        self.body = b"{}"
        self.error = None

    def handler(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        return httpx.Response(self.status_code, content=iter([self.body]))

    def client_factory(self, settings):
        client = build_client(settings, transport=httpx.MockTransport(self.handler))
        self.clients.append(client)
        return client


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Drop METEOMATICS_* variables and keep every .env lookup inside tmp_path.

    The user .env path in ``AppSettings.model_config`` is computed at import
    time, so it is replaced here as well as ``XDG_CONFIG_HOME``.
    """
    for name in list(os.environ):
        if name.upper().startswith("METEOMATICS_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setitem(
        AppSettings.model_config,
        "env_file",
        (".env", str(tmp_path / "config" / "meteofetch" / ".env")),
    )
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        return AppSettings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def mock_api():
    return MockApi()
