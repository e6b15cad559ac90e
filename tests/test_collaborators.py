from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from auto_build.bundle.collaborators import (
    BundleRequest,
    CommandBundle,
    CommandBundler,
    CommandDeclarationGenerator,
    DeclarationEntry,
    ModuleFormat,
    OutputTarget,
)
from auto_build.bundle.dependencies import ExternalPredicate
from auto_build.errors import CollaboratorError


def _request(tmp_path: Path, *targets: OutputTarget) -> BundleRequest:
    source = tmp_path / "src" / "index.ts"
    source.parent.mkdir(parents=True, exist_ok=True)
    source.write_text("export const answer = 42\n", encoding="utf-8")
    return BundleRequest(
        input=source,
        output=list(targets),
        external=ExternalPredicate(names=("chalk", "@scope/pkg")),
    )


def test_sourcemap_file_sits_beside_output(tmp_path: Path) -> None:
    target = OutputTarget(file=tmp_path / "out" / "index.js", format=ModuleFormat.ESM)
    assert target.sourcemap_file == tmp_path / "out" / "index.js.map"
    assert OutputTarget(file=target.file, format=ModuleFormat.ESM, sourcemap=False).sourcemap_file is None


def test_command_bundle_renders_placeholders(tmp_path: Path) -> None:
    target = OutputTarget(file=tmp_path / "out" / "index.cjs", format=ModuleFormat.CJS)
    request = _request(tmp_path, target)
    bundle = CommandBundle(
        "rollup {input} --file {file} --format {format} {sourcemap} {plugins} {externals}",
        request,
        None,
    )
    command = bundle.render(target)
    assert f"--file {target.file}" in command
    assert "--format cjs" in command
    assert "--sourcemap" in command
    assert "--plugin typescript --plugin terser" in command
    assert "--external chalk,@scope/pkg,vscode" in command


def test_command_bundler_runs_command_per_target(tmp_path: Path) -> None:
    esm = OutputTarget(file=tmp_path / "out" / "index.js", format=ModuleFormat.ESM, sourcemap=False)
    cjs = OutputTarget(file=tmp_path / "out" / "index.cjs", format=ModuleFormat.CJS, sourcemap=False)
    request = _request(tmp_path, esm, cjs)
    bundler = CommandBundler("cp {input} {file}")

    async def scenario() -> None:
        compiled = await bundler.compile(request)
        await asyncio.gather(*(compiled.write(target) for target in request.output))
        await compiled.close()

    asyncio.run(scenario())
    assert esm.file.read_text(encoding="utf-8") == "export const answer = 42\n"
    assert cjs.file.exists()


def test_command_bundler_reports_failure(tmp_path: Path) -> None:
    target = OutputTarget(file=tmp_path / "out" / "index.js", format=ModuleFormat.ESM)
    request = _request(tmp_path, target)
    bundler = CommandBundler("echo broken >&2; exit 3")

    async def scenario() -> None:
        compiled = await bundler.compile(request)
        await compiled.write(target)

    with pytest.raises(CollaboratorError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.returncode == 3
    assert "broken" in excinfo.value.logs


def test_command_bundler_requires_source(tmp_path: Path) -> None:
    request = BundleRequest(
        input=tmp_path / "missing.ts",
        output=[],
        external=ExternalPredicate(),
    )
    with pytest.raises(FileNotFoundError):
        asyncio.run(CommandBundler("true").compile(request))


def test_command_declaration_generator_returns_text(tmp_path: Path) -> None:
    source = tmp_path / "index.d.ts"
    source.write_text("export declare const answer: number;\n", encoding="utf-8")
    generator = CommandDeclarationGenerator("cp {input} {output}")

    contents = asyncio.run(generator.generate([DeclarationEntry(file_path=source)]))

    assert contents == ["export declare const answer: number;\n"]


def test_command_declaration_generator_requires_output(tmp_path: Path) -> None:
    source = tmp_path / "index.ts"
    source.write_text("", encoding="utf-8")
    generator = CommandDeclarationGenerator("true {input}")

    with pytest.raises(CollaboratorError):
        asyncio.run(generator.generate([DeclarationEntry(file_path=source)]))
