"""Interfaces to the bundler and declaration generator used during builds."""

from __future__ import annotations

import asyncio
import logging
import shlex
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Dict, Optional, Sequence, Union

from ..errors import CollaboratorError
from .dependencies import EDITOR_HOST_MODULE, ExternalPredicate

logger = logging.getLogger(__name__)

# Language-to-JS transform first, then minification.
DEFAULT_PLUGINS = ("typescript", "terser")

DEFAULT_BUNDLER_COMMAND = (
    "npx --no-install rollup {input} --file {file} --format {format} {sourcemap} "
    "{plugins} {externals}"
)
DEFAULT_DECLARATION_COMMAND = (
    "npx --no-install dts-bundle-generator --silent --no-banner --out-file {output} {input}"
)


class ModuleFormat(str, Enum):
    ESM = "esm"
    CJS = "cjs"


@dataclass(frozen=True, slots=True)
class OutputTarget:
    file: Path
    format: ModuleFormat
    sourcemap: bool = True

    @property
    def sourcemap_file(self) -> Optional[Path]:
        if not self.sourcemap:
            return None
        return self.file.with_name(f"{self.file.name}.map")


@dataclass(frozen=True, slots=True)
class BundleRequest:
    """Everything a bundler needs to compile one entry."""

    input: Path
    output: Sequence[OutputTarget]
    external: ExternalPredicate
    plugins: Sequence[str] = DEFAULT_PLUGINS


@dataclass(frozen=True, slots=True)
class DeclarationEntry:
    file_path: Path


class CompiledBundle(ABC):
    """A compiled entry that can be written to any number of targets."""

    @abstractmethod
    async def write(self, target: OutputTarget) -> None:
        ...

    async def close(self) -> None:
        return None


class Bundler(ABC):
    name: str

    @abstractmethod
    async def compile(self, request: BundleRequest) -> CompiledBundle:
        ...


class DeclarationGenerator(ABC):
    """Produces bundled declaration text, one string per requested entry.

    Implementations may be synchronous or return an awaitable.
    """

    name: str

    @abstractmethod
    def generate(
        self, entries: Sequence[DeclarationEntry]
    ) -> Union[Sequence[str], Awaitable[Sequence[str]]]:
        ...


async def _run_shell(command: str, *, cwd: Optional[Path] = None) -> str:
    logger.debug("Executing %s", command)
    proc = await asyncio.create_subprocess_shell(
        command,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    out = stdout.decode("utf-8", errors="replace").strip()
    err = stderr.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        logs = [text for text in (out, err) if text]
        raise CollaboratorError(
            f"Command exited with status {proc.returncode}: {command}",
            command=command,
            returncode=proc.returncode,
            logs=logs,
        )
    return out


def _render(command: str, replacements: Dict[str, str]) -> str:
    for placeholder, value in replacements.items():
        command = command.replace(placeholder, value)
    return command


class CommandBundle(CompiledBundle):
    def __init__(self, command: str, request: BundleRequest, cwd: Optional[Path]) -> None:
        self.command = command
        self.request = request
        self.cwd = cwd

    def render(self, target: OutputTarget) -> str:
        names = (*self.request.external.names, EDITOR_HOST_MODULE)
        externals = f"--external {shlex.quote(','.join(names))}"
        plugins = " ".join(f"--plugin {shlex.quote(name)}" for name in self.request.plugins)
        return _render(
            self.command,
            {
                "{input}": shlex.quote(str(self.request.input)),
                "{file}": shlex.quote(str(target.file)),
                "{format}": shlex.quote(target.format.value),
                "{sourcemap}": "--sourcemap" if target.sourcemap else "",
                "{externals}": externals,
                "{plugins}": plugins,
            },
        )

    async def write(self, target: OutputTarget) -> None:
        target.file.parent.mkdir(parents=True, exist_ok=True)
        await _run_shell(self.render(target), cwd=self.cwd)


class CommandBundler(Bundler):
    """Bundler backed by a shell command template run once per target.

    ``{externals}`` expands to the dependency names plus the editor host
    module. The ``node:`` prefix rule is a pattern, so it cannot be passed
    as a name list; templates whose bundler does not already treat
    ``node:`` imports as external must add that themselves.
    """

    name = "command"

    def __init__(self, command: str = DEFAULT_BUNDLER_COMMAND, *, cwd: Optional[Path] = None) -> None:
        self.command = command
        self.cwd = cwd

    async def compile(self, request: BundleRequest) -> CompiledBundle:
        if not request.input.exists():
            raise FileNotFoundError(f"Entry source not found: {request.input}")
        return CommandBundle(self.command, request, self.cwd)


class CommandDeclarationGenerator(DeclarationGenerator):
    """Declaration generator backed by a shell command writing to ``{output}``."""

    name = "command"

    def __init__(self, command: str = DEFAULT_DECLARATION_COMMAND, *, cwd: Optional[Path] = None) -> None:
        self.command = command
        self.cwd = cwd

    async def generate(self, entries: Sequence[DeclarationEntry]) -> Sequence[str]:
        results = []
        for entry in entries:
            results.append(await self._generate_one(entry))
        return results

    async def _generate_one(self, entry: DeclarationEntry) -> str:
        with tempfile.TemporaryDirectory(prefix="auto-build-") as tmp_dir:
            output = Path(tmp_dir) / f"{entry.file_path.stem}.d.ts"
            command = _render(
                self.command,
                {
                    "{input}": shlex.quote(str(entry.file_path)),
                    "{output}": shlex.quote(str(output)),
                },
            )
            await _run_shell(command, cwd=self.cwd)
            if not output.exists():
                raise CollaboratorError(f"Command produced no declarations: {command}", command=command)
            return output.read_text(encoding="utf-8")
