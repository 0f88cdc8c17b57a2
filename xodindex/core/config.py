# -*- coding: utf-8 -*-
"""
Configuration Module - Immutable settings for the sync and mirror runs.

Provides an ``IndexConfig`` dataclass holding registry URLs, timeouts,
retry counts and output locations. Every component receives the config
at construction instead of reading module globals.

Settings are resolved using a priority chain:
1. Explicit overrides passed to ``load_config`` (CLI flags)
2. ``PM_SWAGGER_URL`` environment variable (service description only)
3. JSON config file (``XODINDEX_CONFIG`` or ``<root>/xodindex.json``)
4. Built-in defaults

License
-------
MIT License
Copyright (c) 2026 xod-library-index contributors
See LICENSE file for full text.

Created
-------
2026-10-17

Modified
--------
2026-10-17
"""

# Standard library
import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

_ROOT_ENV_VAR = "XODINDEX_ROOT"
_CONFIG_ENV_VAR = "XODINDEX_CONFIG"
_SWAGGER_ENV_VAR = "PM_SWAGGER_URL"
_CONFIG_FILE = "xodindex.json"


@dataclass(frozen=True)
class IndexConfig:
    """Settings shared by the catalog sync and the artifact mirror.

    Attributes
    ----------
    root_dir : Path
        Repository root; catalog and mirror paths hang off it.
    libs_base_url : str
        Registry listing URL, also the prefix of library detail pages.
    swagger_url : str
        Base URL of the package-manager service description.
    operation_id : str
        Operation that downloads one library version.
    source_provider : str
        Provider name recorded on catalog records and artifacts.
    request_timeout : float
        Per-attempt HTTP timeout in seconds.
    max_fetch_retries : int
        Retries after the first attempt.
    retry_base_delay : float
        Backoff unit in seconds; attempt ``n`` waits ``n * base``.
    retryable_statuses : Tuple[int, ...]
        HTTP statuses that are retried.
    max_normalize_retries : int
        Attempts at normalizing one record before skipping it.
    max_workers : int
        Worker threads for detail extraction and downloads. 1 runs
        everything sequentially.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    root_dir: Path = Path(".")
    libs_base_url: str = "https://xod.io/libs/"
    swagger_url: str = "https://pm.xod.io/swagger/"
    operation_id: str = "getLibVersionXodball"
    source_provider: str = "xod.io"
    request_timeout: float = 20.0
    max_fetch_retries: int = 4
    retry_base_delay: float = 1.5
    retryable_statuses: Tuple[int, ...] = (408, 429, 500, 502, 503, 504)
    max_normalize_retries: int = 3
    max_workers: int = 1
    user_agent: str = (
        "xod-library-index/1.0 (+https://github.com/JoyfulOak/xod2-library-index)"
    )

    @property
    def index_dir(self) -> Path:
        return self.root_dir / "index"

    @property
    def index_path(self) -> Path:
        """Catalog document written by the sync."""
        return self.index_dir / "index.json"

    @property
    def overlay_path(self) -> Path:
        """Curated overlay merged over discovered records."""
        return self.index_dir / "overlay.json"

    @property
    def mirror_dir(self) -> Path:
        return self.root_dir / "mirror"

    @property
    def manifest_path(self) -> Path:
        return self.mirror_dir / "index.json"

    @property
    def state_path(self) -> Path:
        return self.mirror_dir / "state.json"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        data = asdict(self)
        data["root_dir"] = str(self.root_dir)
        data["retryable_statuses"] = list(self.retryable_statuses)
        return data

    def save(self, path: Path) -> None:
        """Save config to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)


def resolve_root_dir(root_dir: Optional[Path] = None) -> Path:
    """Resolve the repository root.

    Priority: explicit argument, ``XODINDEX_ROOT``, current directory.
    """
    if root_dir is not None:
        return Path(root_dir)
    env_root = os.environ.get(_ROOT_ENV_VAR)
    if env_root:
        return Path(env_root)
    return Path.cwd()


def resolve_config_path(root_dir: Path) -> Path:
    """Resolve the config file: ``XODINDEX_CONFIG`` or ``<root>/xodindex.json``."""
    env_path = os.environ.get(_CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return root_dir / _CONFIG_FILE


def _coerce(data: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(IndexConfig)}
    values = {k: v for k, v in data.items() if k in known}
    if "root_dir" in values:
        values["root_dir"] = Path(values["root_dir"])
    if "retryable_statuses" in values:
        values["retryable_statuses"] = tuple(
            int(s) for s in values["retryable_statuses"]
        )
    return values


def load_config(
    path: Optional[Path] = None,
    root_dir: Optional[Path] = None,
    **overrides: Any,
) -> IndexConfig:
    """Load configuration from file, environment and overrides.

    Parameters
    ----------
    path : Optional[Path]
        Config file path. Defaults to the resolved config path.
    root_dir : Optional[Path]
        Repository root. Defaults to ``XODINDEX_ROOT`` or the cwd.
    **overrides
        Field values applied last. ``None`` values are ignored.

    Returns
    -------
    IndexConfig
        Loaded or default configuration.
    """
    root = resolve_root_dir(root_dir)
    path = path or resolve_config_path(root)

    values: Dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                values.update(_coerce(data))
            else:
                logger.warning("Ignoring config %s: not a JSON object", path)
        except (json.JSONDecodeError, OSError, TypeError, ValueError) as e:
            logger.warning("Failed to load config from %s: %s", path, e)

    values.setdefault("root_dir", root)
    if root_dir is not None:
        values["root_dir"] = Path(root_dir)

    env_swagger = os.environ.get(_SWAGGER_ENV_VAR)
    if env_swagger:
        values["swagger_url"] = env_swagger

    config = IndexConfig(**values)
    applied = _coerce({k: v for k, v in overrides.items() if v is not None})
    return replace(config, **applied) if applied else config
