"""Shared fixtures for paperless_api tests."""

import os
import uuid

import pytest

from paperless_api.client import PaperlessClient
from paperless_api.config import get_settings

BASE_URL = "http://paperless.test:8000"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep settings loading away from the real environment, settings files and SOPS."""
    for key in list(os.environ):
        if key.startswith("PAPERLESS_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("PAPERLESS_USE_SOPS", "false")
    monkeypatch.setenv("PAPERLESS_SETTINGS_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def base_url() -> str:
    return BASE_URL


@pytest.fixture()
async def client():
    async with PaperlessClient(BASE_URL, "test-token", task_poll_delay=0.5) as c:
        yield c


@pytest.fixture()
def task_id() -> uuid.UUID:
    return uuid.UUID("8f3a7c1e-2b4d-4e6f-9a0b-1c2d3e4f5a6b")
