from __future__ import annotations

import json
from pathlib import Path

import pytest

from auto_build.bundle.collaborators import DEFAULT_BUNDLER_COMMAND
from auto_build.config import default_monorepo, load_settings


def test_load_settings_defaults(tmp_path: Path) -> None:
    settings = load_settings({"AUTO_BUILD_ROOT": str(tmp_path)})
    assert settings.root == tmp_path
    assert settings.log is True
    assert settings.color is True
    assert settings.bundler_command == DEFAULT_BUNDLER_COMMAND
    assert settings.strict is False


def test_load_settings_reads_environment(tmp_path: Path) -> None:
    env = {
        "AUTO_BUILD_ROOT": str(tmp_path / "pkg"),
        "AUTO_BUILD_MONOREPO": str(tmp_path),
        "AUTO_BUILD_QUIET": "yes",
        "NO_COLOR": "1",
        "AUTO_BUILD_BUNDLER": "esbuild {input} --outfile={file}",
    }
    settings = load_settings(env)
    assert settings.monorepo == tmp_path
    assert settings.log is False
    assert settings.color is False
    assert settings.bundler_command == "esbuild {input} --outfile={file}"
    assert settings.reporter().enabled is False


def test_overrides_win_over_environment(tmp_path: Path) -> None:
    settings = load_settings({"AUTO_BUILD_QUIET": "0"}, root=tmp_path, log=False, strict=None)
    assert settings.root == tmp_path
    assert settings.log is False
    assert settings.strict is False


def test_unknown_override_rejected(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        load_settings({}, root=tmp_path, colour=False)


def test_default_monorepo_requires_parent_manifest(tmp_path: Path) -> None:
    root = tmp_path / "pkg"
    root.mkdir()
    assert default_monorepo(root) is None
    (tmp_path / "package.json").write_text(json.dumps({"private": True}), encoding="utf-8")
    assert default_monorepo(root) == tmp_path.resolve()
