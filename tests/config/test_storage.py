from __future__ import annotations

from typing import TYPE_CHECKING

from lineage_sync.config import StorageConfig, get_database_config, get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_storage_config_uses_data_dir_env(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("LINEAGE_SYNC_DATA_DIR", str(tmp_path / "data"))

    storage = get_storage_config()

    assert storage.resolve_data_dir() == (tmp_path / "data").resolve()
    assert storage.database_uri() == f"sqlite+pysqlite:///{(tmp_path / 'data').resolve()}/catalog.db"
    assert (tmp_path / "data").is_dir()


def test_database_config_prefers_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///from-env.db")

    assert get_database_config(override_uri="sqlite://").uri == "sqlite://"
    assert get_database_config().uri == "sqlite+pysqlite:///from-env.db"


def test_database_config_falls_back_to_storage(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    storage = StorageConfig(data_dir=tmp_path, database_filename="custom.db")

    config = get_database_config(storage=storage)

    assert config.uri == f"sqlite+pysqlite:///{tmp_path.resolve()}/custom.db"
