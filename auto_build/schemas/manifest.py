"""Pydantic models describing the ``package.json`` fields auto-build reads."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ManifestError


class ExportEntry(BaseModel):
    """One buildable item of the manifest ``exports`` map.

    Paths are kept as written in the manifest, relative to its directory.
    """

    key: str
    src: str
    types: Optional[str] = Field(default=None, description="Bundled declaration output.")
    import_: Optional[str] = Field(default=None, alias="import", description="ES module output.")
    require: Optional[str] = Field(default=None, description="CommonJS output.")

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @field_validator("types", "import_", "require", mode="before")
    @classmethod
    def _optional_path(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and value:
            return value
        return None

    @property
    def has_library_outputs(self) -> bool:
        return self.import_ is not None or self.require is not None

    @property
    def has_outputs(self) -> bool:
        return self.has_library_outputs or self.types is not None


@dataclass(frozen=True, slots=True)
class SkippedExport:
    """An ``exports`` item that produces no build task."""

    key: str
    reason: str


PlannedExport = Union[ExportEntry, SkippedExport]


class PackageManifest(BaseModel):
    name: Optional[str] = None
    dependencies: Dict[str, Any] = Field(default_factory=dict)
    exports: Any = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("dependencies", mode="before")
    @classmethod
    def _dependency_map(cls, value: Any) -> Dict[str, Any]:
        if isinstance(value, Mapping):
            return {str(key): item for key, item in value.items()}
        return {}

    def export_plan(self, path: Optional[Path] = None) -> List[PlannedExport]:
        """Validate ``exports`` and classify each item in manifest order."""

        if not isinstance(self.exports, Mapping):
            location = path if path is not None else "package.json"
            raise ManifestError(f"invalid {location}: 'exports' must be an object", path)
        return [_plan_export(str(key), value) for key, value in self.exports.items()]


def _plan_export(key: str, value: Any) -> PlannedExport:
    if not isinstance(value, Mapping):
        return SkippedExport(key=key, reason="entry is not an object")
    if not isinstance(value.get("src"), str):
        return SkippedExport(key=key, reason="entry has no string 'src'")
    entry = ExportEntry.model_validate({**value, "key": key})
    if not entry.has_outputs:
        return SkippedExport(key=key, reason="entry declares no outputs")
    return entry
