"""Where the catalog snapshot and the HTTP response cache live on disk.

Both files are caches of org state and can be deleted at any time; the catalog
is rebuilt by ``trailpack catalog-import``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR_ENV = "TRAILPACK_DATA_DIR"
CATALOG_URI_ENV = "CATALOG_DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    catalog_uri_override: str | None = None

    @property
    def catalog_file(self) -> Path:
        return self.data_dir / "catalog.db"

    @property
    def http_cache_file(self) -> Path:
        return self.data_dir / "http_cache.db"

    def prepare(self) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir

    def catalog_uri(self) -> str:
        """SQLAlchemy URI of the catalog; an explicit override skips the data dir."""

        if self.catalog_uri_override:
            return self.catalog_uri_override
        self.prepare()
        return f"sqlite+pysqlite:///{self.catalog_file}"

    def http_cache_path(self) -> str:
        self.prepare()
        return str(self.http_cache_file)


def _default_data_dir() -> Path:
    if os.name == "nt":
        root = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = os.getenv("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(root) / "trailpack"


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv(DATA_DIR_ENV, "").strip()
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(
        data_dir=data_dir.expanduser().resolve(),
        catalog_uri_override=os.getenv(CATALOG_URI_ENV, "").strip() or None,
    )
