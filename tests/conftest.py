"""Root conftest for engine, client and API tests.

Provides:
- FastAPI AsyncClient bound to the app through ASGITransport
- A LOG_DIR redirected to a temp directory so tests never write to ./logs
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture(autouse=True)
def _tmp_log_dir(tmp_path, monkeypatch):
    import screenmap.logging_config as logging_config

    monkeypatch.setattr(logging_config, "LOG_DIR", tmp_path / "logs")


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI routes."""
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
