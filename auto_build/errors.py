"""Exceptions raised by auto-build."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class AutoBuildError(RuntimeError):
    """Base class for errors surfaced to auto-build callers."""


class ManifestError(AutoBuildError):
    """Raised when a package manifest cannot be used for a build."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class CollaboratorError(AutoBuildError):
    """Raised when an external bundler or declaration command fails."""

    def __init__(
        self,
        message: str,
        *,
        command: Optional[str] = None,
        returncode: Optional[int] = None,
        logs: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.logs = list(logs)


class SyncError(AutoBuildError):
    """Raised when monorepo metadata cannot be synced into a package."""
