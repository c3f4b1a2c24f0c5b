"""Unit tests for registry engine construction."""

import pytest

from infrastructure.database.engines import build_registry_url
from infrastructure.settings import DatabaseSettings


@pytest.fixture
def settings_for(monkeypatch):
    def _make(url: str) -> DatabaseSettings:
        monkeypatch.setenv("DATABASE_URL", url)
        return DatabaseSettings(_env_file=None)

    return _make


class TestBuildRegistryUrl:
    @pytest.mark.parametrize(
        "raw",
        [
            "postgres://user:pw@db.example.com:5432/registry",
            "postgresql://user:pw@db.example.com:5432/registry",
            "postgresql+asyncpg://user:pw@db.example.com:5432/registry",
        ],
    )
    def test_forces_asyncpg_driver(self, settings_for, raw):
        url = build_registry_url(settings_for(raw))
        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db.example.com"
        assert url.database == "registry"
        assert url.password == "pw"
