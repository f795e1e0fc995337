"""File system helpers."""

from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: str | Path) -> Path:
    """Create the directory if it does not exist."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def atomic_write(path: str | Path, content: bytes) -> Path:
    """Write binary content to disk atomically, replacing any existing file."""
    target = Path(path)
    ensure_dir(target.parent)
    temp_path = target.parent / (target.name + ".tmp")
    try:
        with open(temp_path, "wb") as handle:
            handle.write(content)
        os.replace(temp_path, target)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return target


def human_size(num_bytes: int) -> str:
    """Render a byte count in megabytes with one decimal."""
    return f"{num_bytes / 1024 / 1024:.1f} MB"
