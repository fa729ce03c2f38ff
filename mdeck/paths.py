"""Resolution of image paths referenced from a deck."""
from __future__ import annotations

from pathlib import Path


__all__ = ["resolve_asset", "is_remote"]


def is_remote(src: str) -> bool:
    return src.startswith(("http://", "https://", "data:"))


def resolve_asset(src: str, *, base_dir: str | Path) -> str:
    """Return the location a renderer should load *src* from.

    Rules
    -----
    1. Remote or data-URIs are returned unchanged.
    2. ``file://`` URLs are stripped to an absolute path first.
    3. Relative paths are resolved against *base_dir*.
    """
    if is_remote(src):
        return src

    if src.startswith("file://"):
        abs_path = Path(src[7:]).expanduser().resolve()
    else:
        abs_path = (Path(base_dir) / Path(src).expanduser()).resolve()

    return str(abs_path)
