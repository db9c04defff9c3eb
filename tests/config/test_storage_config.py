from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from benchfuse.config import StorageConfig, get_storage_config


def test_cache_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-cache"
    monkeypatch.setenv("BENCHFUSE_CACHE_DIR", str(custom))

    config = get_storage_config()

    assert config.resolve_cache_dir() == custom.resolve()


def test_cache_dir_falls_back_to_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("BENCHFUSE_CACHE_DIR", raising=False)
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))

    config = get_storage_config()

    assert config.resolve_cache_dir() == (tmp_path / "xdg" / "benchfuse").resolve()


def test_artifact_paths_do_not_create_directory(tmp_path: Path) -> None:
    config = StorageConfig(cache_dir=tmp_path / "cache")

    primary, secondary, merged = config.artifact_paths()

    assert primary.name == "artificial_analysis.parquet"
    assert secondary.name == "models_dev.parquet"
    assert merged.name == "llms.parquet"
    assert not (tmp_path / "cache").exists()


def test_merged_path_creates_directory(tmp_path: Path) -> None:
    config = StorageConfig(cache_dir=tmp_path / "nested" / "cache")

    path = config.merged_path()

    assert path.parent.is_dir()
