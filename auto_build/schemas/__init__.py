"""Schema definitions for package manifests."""

from .manifest import ExportEntry, PackageManifest, PlannedExport, SkippedExport

__all__ = [
    "ExportEntry",
    "PackageManifest",
    "PlannedExport",
    "SkippedExport",
]
