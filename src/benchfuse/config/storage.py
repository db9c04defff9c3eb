"""Cache directory configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "benchfuse"
PRIMARY_SNAPSHOT_FILENAME: Final[str] = "artificial_analysis.parquet"
SECONDARY_SNAPSHOT_FILENAME: Final[str] = "models_dev.parquet"
MERGED_FILENAME: Final[str] = "llms.parquet"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    cache_dir: Path
    primary_filename: str = PRIMARY_SNAPSHOT_FILENAME
    secondary_filename: str = SECONDARY_SNAPSHOT_FILENAME
    merged_filename: str = MERGED_FILENAME

    def resolve_cache_dir(self) -> Path:
        return self.cache_dir.expanduser().resolve()

    def ensure_cache_dir(self) -> Path:
        cache_dir = self.resolve_cache_dir()
        cache_dir.mkdir(parents=True, exist_ok=True)
        return cache_dir

    def primary_snapshot_path(self, *, ensure: bool = True) -> Path:
        return self._path(self.primary_filename, ensure=ensure)

    def secondary_snapshot_path(self, *, ensure: bool = True) -> Path:
        return self._path(self.secondary_filename, ensure=ensure)

    def merged_path(self, *, ensure: bool = True) -> Path:
        return self._path(self.merged_filename, ensure=ensure)

    def artifact_paths(self, *, ensure: bool = False) -> tuple[Path, Path, Path]:
        return (
            self.primary_snapshot_path(ensure=ensure),
            self.secondary_snapshot_path(ensure=ensure),
            self.merged_path(ensure=ensure),
        )

    def _path(self, filename: str, *, ensure: bool) -> Path:
        base = self.ensure_cache_dir() if ensure else self.resolve_cache_dir()
        return base / filename


def _default_cache_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
        return (base_path / APP_DIR_NAME / "cache").expanduser().resolve()
    base = os.getenv("XDG_CACHE_HOME")
    base_path = Path(base) if base else (Path.home() / ".cache")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("BENCHFUSE_CACHE_DIR")
    cache_dir = Path(env_dir) if env_dir else _default_cache_dir()
    return StorageConfig(cache_dir=cache_dir)
