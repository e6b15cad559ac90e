"""Utilities for deciding which imports stay external to a bundle."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..schemas.manifest import PackageManifest

BUILTIN_PREFIX = "node:"
# Module namespace only provided by the editor extension host at runtime.
EDITOR_HOST_MODULE = "vscode"

_PACKAGE_NAME = re.compile(
    r"(?:(?:@(?:[a-z0-9\-*~][a-z0-9\-*._~]*)?/[a-z0-9\-._~])|[a-z0-9\-~])[a-z0-9\-._~]*"
)


def is_valid_package_name(name: Any) -> bool:
    """Return whether ``name`` follows registry package-name syntax."""

    if not isinstance(name, str):
        return False
    return _PACKAGE_NAME.fullmatch(name) is not None


def parse_dependencies(manifest: Any) -> List[str]:
    """Return the valid names under ``dependencies`` in manifest order."""

    if isinstance(manifest, PackageManifest):
        dependencies: Any = manifest.dependencies
    elif isinstance(manifest, Mapping):
        dependencies = manifest.get("dependencies")
    else:
        return []
    if not isinstance(dependencies, Mapping):
        return []
    return [name for name in dependencies if is_valid_package_name(name)]


def _unique(names: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(names))


@dataclass(frozen=True, slots=True)
class ExternalPredicate:
    """Callable deciding whether an import specifier stays external."""

    names: Tuple[str, ...] = ()

    def __call__(self, source: str, importer: Optional[str] = None, is_resolved: bool = False) -> bool:
        if is_resolved:
            return False
        return (
            source.startswith(BUILTIN_PREFIX)
            or source == EDITOR_HOST_MODULE
            or source in self.names
        )


def resolve_external(own: Any, parent: Any = None) -> ExternalPredicate:
    """Build the external predicate from a package and its workspace manifest."""

    dependencies = parse_dependencies(own)
    if parent is not None:
        dependencies.extend(parse_dependencies(parent))
    return ExternalPredicate(names=_unique(dependencies))
