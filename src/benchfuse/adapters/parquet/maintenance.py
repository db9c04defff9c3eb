"""Inspect and clear the cache directory."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from benchfuse.domain.errors import CacheCorruptionError

from ._atomic import TEMP_SUFFIX, read_metadata

if TYPE_CHECKING:
    from pathlib import Path

    from benchfuse.config import StorageConfig

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArtifactStatus:
    path: Path
    size: int
    metadata: dict[str, object] | None
    corrupt: bool = False


@dataclass(frozen=True, slots=True)
class CacheStatus:
    cache_dir: Path
    artifacts: tuple[ArtifactStatus, ...]

    @property
    def artifact_count(self) -> int:
        return len(self.artifacts)

    @property
    def total_size(self) -> int:
        return sum(artifact.size for artifact in self.artifacts)

    @property
    def total_size_human(self) -> str:
        return human_size(self.total_size)


def human_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def cache_status(storage: StorageConfig) -> CacheStatus:
    artifacts: list[ArtifactStatus] = []
    for path in storage.artifact_paths():
        if not path.is_file():
            continue
        try:
            metadata = read_metadata(path)
            corrupt = False
        except CacheCorruptionError as exc:
            log.warning("Cache artifact is corrupt: %s", exc)
            metadata = None
            corrupt = True
        artifacts.append(
            ArtifactStatus(path=path, size=path.stat().st_size, metadata=metadata, corrupt=corrupt)
        )
    return CacheStatus(cache_dir=storage.resolve_cache_dir(), artifacts=tuple(artifacts))


def clear_cache(storage: StorageConfig) -> list[Path]:
    """Delete every artifact and leftover temporary file; return what was removed."""

    cache_dir = storage.resolve_cache_dir()
    if not cache_dir.is_dir():
        return []
    targets = [path for path in storage.artifact_paths() if path.is_file()]
    for path in storage.artifact_paths():
        targets.extend(sorted(cache_dir.glob(f".{path.name}.*{TEMP_SUFFIX}")))

    removed: list[Path] = []
    for path in targets:
        path.unlink(missing_ok=True)
        removed.append(path)
    log.info("Removed %d cache files from %s", len(removed), cache_dir)
    return removed
