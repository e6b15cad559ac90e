"""Manifest-driven bundle orchestration."""

from .builder import BuildReport, ManifestBuilder, TaskOutcome, build_as_manifest
from .dependencies import ExternalPredicate, is_valid_package_name, parse_dependencies, resolve_external
from .manifest import load_manifest

__all__ = [
    "BuildReport",
    "ExternalPredicate",
    "ManifestBuilder",
    "TaskOutcome",
    "build_as_manifest",
    "is_valid_package_name",
    "load_manifest",
    "parse_dependencies",
    "resolve_external",
]
