"""Sync monorepo metadata files into a child package."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .bundle.utils import write_text
from .errors import SyncError
from .format import SYNCED
from .reporting import Reporter

LICENSE_NAME = "LICENSE"
CONTRIBUTORS_NAME = "CONTRIBUTORS.yaml"


def sync_license(root: Union[str, Path], monorepo: Union[str, Path], reporter: Reporter) -> Path:
    """Copy the monorepo ``LICENSE`` into ``root`` verbatim."""

    src = Path(monorepo) / LICENSE_NAME
    out = Path(root) / LICENSE_NAME
    if not src.is_file():
        raise SyncError(f"License not found: {src}")
    shutil.copyfile(src, out)
    reporter.sync(src, out, SYNCED)
    return out


def _lists_repo(record: Any, name: str) -> bool:
    repo = record.get("repo")
    if isinstance(repo, str):
        return repo == name
    if isinstance(repo, list):
        return name in repo
    return False


def filter_contributors(registry: Any, name: str) -> Dict[str, Any]:
    """Keep the contributors whose ``repo`` names the package ``name``."""

    if not isinstance(registry, dict):
        raise SyncError("Contributors registry must be a mapping of authors")
    kept: Dict[str, Any] = {}
    for author, record in registry.items():
        if not record or not isinstance(record, dict):
            continue
        if _lists_repo(record, name):
            kept[author] = {key: value for key, value in record.items() if key != "repo"}
    return kept


def sync_contributors(root: Union[str, Path], monorepo: Union[str, Path], reporter: Reporter) -> Path:
    """Write the monorepo contributors related to ``root`` into ``root``.

    The package is identified by the name of its directory.
    """

    root = Path(root)
    src = Path(monorepo) / CONTRIBUTORS_NAME
    if not src.is_file():
        raise SyncError(f"Contributors registry not found: {src}")
    try:
        content = src.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SyncError(f"Cannot read {src}: {exc}") from exc
    try:
        registry = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SyncError(f"Failed to parse {src}: {exc}") from exc

    kept = filter_contributors(registry, root.resolve().name)
    out = root / CONTRIBUTORS_NAME
    write_text(out, yaml.safe_dump(kept, sort_keys=False, allow_unicode=True))
    reporter.sync(src, out, SYNCED)
    return out
