"""Manifest helpers for manifest-driven builds."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from ..errors import ManifestError
from ..schemas.manifest import PackageManifest

MANIFEST_NAME = "package.json"


def manifest_path(root: Union[str, Path]) -> Path:
    return Path(root) / MANIFEST_NAME


def load_manifest(root: Union[str, Path]) -> PackageManifest:
    """Load and validate the ``package.json`` located in ``root``."""

    path = manifest_path(root)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"package.json not found: {path}", path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"cannot read {path}: {exc}", path) from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"invalid package.json: {path}: {exc}", path) from exc

    if not isinstance(payload, dict):
        raise ManifestError(f"invalid package.json: {path} is not an object", path)
    try:
        return PackageManifest.model_validate(payload)
    except ValidationError as exc:
        raise ManifestError(f"invalid package.json: {path}: {exc}", path) from exc
