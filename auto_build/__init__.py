"""Manifest-driven library builds for JavaScript packages."""

__version__ = "0.1.0"
from .bundle.builder import BuildReport, ManifestBuilder, TaskOutcome, build_as_manifest
from .bundle.dependencies import ExternalPredicate, is_valid_package_name, parse_dependencies, resolve_external
from .config import BuildSettings, load_settings
from .errors import AutoBuildError, CollaboratorError, ManifestError, SyncError
from .format import Palette, PathDiff, diff_path, format_duration, format_move, format_path
from .reporting import Reporter
from .schemas.manifest import ExportEntry, PackageManifest, SkippedExport
from .sync import sync_contributors, sync_license

__all__ = [
    "__version__",
    "AutoBuildError",
    "BuildReport",
    "BuildSettings",
    "CollaboratorError",
    "ExportEntry",
    "ExternalPredicate",
    "ManifestBuilder",
    "ManifestError",
    "PackageManifest",
    "Palette",
    "PathDiff",
    "Reporter",
    "SkippedExport",
    "SyncError",
    "TaskOutcome",
    "build_as_manifest",
    "diff_path",
    "format_duration",
    "format_move",
    "format_path",
    "is_valid_package_name",
    "load_settings",
    "parse_dependencies",
    "resolve_external",
    "sync_contributors",
    "sync_license",
]
