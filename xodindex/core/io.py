# -*- coding: utf-8 -*-
"""
JSON I/O - Deterministic serialization and atomic document writes.

Every document the pipelines produce goes through ``atomic_write_text``:
content lands in a uniquely named temporary file beside the target and
is moved into place with ``os.replace``, so readers see either the old
or the new document and never a partial one.

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
import os
import uuid
from contextlib import suppress
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default now) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    moment = moment or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def dumps_stable(payload: Any) -> str:
    """Serialize ``payload`` as indented JSON with a trailing newline.

    Key order is the insertion order of the dictionaries, so callers
    build records with a fixed field order.
    """
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def read_json(path: Path, default: Any = None) -> Any:
    """Load a JSON document, returning ``default`` if the file is missing.

    Raises
    ------
    json.JSONDecodeError
        If the file exists but is not valid JSON.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return default


def atomic_write_bytes(path: Path, data: bytes) -> int:
    """Atomically replace ``path`` with ``data``.

    Returns
    -------
    int
        Number of bytes written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp.{uuid.uuid4().hex}")
    replaced = False
    try:
        with temp_path.open("wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, path)
        replaced = True
    finally:
        if not replaced:
            with suppress(FileNotFoundError):
                temp_path.unlink()
    return len(data)


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> int:
    """Encode ``text`` and write it with ``atomic_write_bytes``."""
    return atomic_write_bytes(path, text.encode(encoding))


def atomic_write_json(path: Path, payload: Any) -> int:
    """Serialize with ``dumps_stable`` and write atomically."""
    return atomic_write_text(path, dumps_stable(payload))
