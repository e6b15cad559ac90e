"""Shared helpers used by build and sync tooling."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


def resolve_in(root: Union[str, Path], relative: str) -> Path:
    """Join a manifest-relative path onto the manifest directory."""

    return Path(root) / relative


def write_text(path: Path, content: str, *, newline: Optional[str] = None) -> None:
    """Write text to file ensuring parent directories exist."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline=newline)
