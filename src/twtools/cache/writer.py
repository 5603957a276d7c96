"""Atomic JSON writes for cache slots and archive files."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def write_json(path: Path, data: Any) -> Path:
    """Write *data* as indented JSON to *path* atomically (temp → rename).

    Creates parent directories if needed. A reader never sees a half-written
    file: either the previous content or the new content is in place.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory so os.replace() stays on one filesystem
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return path


def read_json(path: Path) -> Any | None:
    """Return the parsed content of *path*, or None if missing or malformed."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
