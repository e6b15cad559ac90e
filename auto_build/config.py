"""Build settings resolved from the environment and command line."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from .bundle.collaborators import DEFAULT_BUNDLER_COMMAND, DEFAULT_DECLARATION_COMMAND
from .bundle.manifest import manifest_path
from .format import Palette
from .reporting import Reporter

ENV_PREFIX = "AUTO_BUILD_"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class BuildSettings:
    """Configuration describing one auto-build run."""

    root: Path
    monorepo: Optional[Path] = None
    log: bool = True
    color: bool = True
    bundler_command: str = DEFAULT_BUNDLER_COMMAND
    declaration_command: str = DEFAULT_DECLARATION_COMMAND
    sync: bool = True
    strict: bool = False

    @property
    def palette(self) -> Palette:
        return Palette(enabled=self.color)

    def reporter(self) -> Reporter:
        return Reporter(enabled=self.log, palette=self.palette)


def _flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


def default_monorepo(root: Path) -> Optional[Path]:
    """Parent directory of ``root`` when it holds a workspace manifest."""

    parent = root.resolve().parent
    if parent != root.resolve() and manifest_path(parent).is_file():
        return parent
    return None


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> BuildSettings:
    """Resolve settings from ``AUTO_BUILD_*`` variables.

    Keyword overrides (typically parsed CLI arguments) win over the
    environment; ``None`` values are ignored.
    """

    env = os.environ if environ is None else environ

    root = Path(env.get(f"{ENV_PREFIX}ROOT") or Path.cwd())
    monorepo_value = env.get(f"{ENV_PREFIX}MONOREPO")
    values: dict[str, Any] = {
        "root": root,
        "monorepo": Path(monorepo_value) if monorepo_value else None,
        "log": not _flag(env.get(f"{ENV_PREFIX}QUIET")),
        "color": not (_flag(env.get(f"{ENV_PREFIX}NO_COLOR")) or bool(env.get("NO_COLOR"))),
    }
    if env.get(f"{ENV_PREFIX}BUNDLER"):
        values["bundler_command"] = env[f"{ENV_PREFIX}BUNDLER"]
    if env.get(f"{ENV_PREFIX}DECLARATIONS"):
        values["declaration_command"] = env[f"{ENV_PREFIX}DECLARATIONS"]

    known = {item.name for item in fields(BuildSettings)}
    for key, value in overrides.items():
        if key not in known:
            raise TypeError(f"Unknown setting '{key}'")
        if value is not None:
            values[key] = value

    settings = BuildSettings(**values)
    settings.root = Path(settings.root)
    if settings.monorepo is None:
        settings.monorepo = default_monorepo(settings.root)
    else:
        settings.monorepo = Path(settings.monorepo)
    return settings
