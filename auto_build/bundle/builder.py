"""Manifest-driven build orchestration."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, List, Optional, Sequence, Tuple, Union

from ..errors import CollaboratorError
from ..format import DECLARATION, LIBRARY, SOURCEMAP
from ..reporting import Reporter
from ..schemas.manifest import ExportEntry, SkippedExport
from .collaborators import (
    DEFAULT_PLUGINS,
    Bundler,
    BundleRequest,
    CommandBundler,
    CommandDeclarationGenerator,
    CompiledBundle,
    DeclarationEntry,
    DeclarationGenerator,
    ModuleFormat,
    OutputTarget,
)
from .dependencies import ExternalPredicate, resolve_external
from .manifest import load_manifest, manifest_path
from .utils import resolve_in, write_text

logger = logging.getLogger(__name__)

LIBRARY_TASK = "library"
DECLARATIONS_TASK = "declarations"


@dataclass(slots=True)
class TaskOutcome:
    """Settled result of one build task."""

    key: str
    kind: str
    outputs: List[Path] = field(default_factory=list)
    errors: List[BaseException] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(slots=True)
class BuildReport:
    root: Path
    outcomes: List[TaskOutcome] = field(default_factory=list)
    skipped: List[SkippedExport] = field(default_factory=list)

    @property
    def failed(self) -> List[TaskOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def outputs(self) -> List[Path]:
        return [path for outcome in self.outcomes for path in outcome.outputs]


def output_targets(root: Path, entry: ExportEntry) -> List[OutputTarget]:
    """Library targets requested by an export entry, ESM first."""

    targets: List[OutputTarget] = []
    if entry.import_:
        targets.append(OutputTarget(file=resolve_in(root, entry.import_), format=ModuleFormat.ESM))
    if entry.require:
        targets.append(OutputTarget(file=resolve_in(root, entry.require), format=ModuleFormat.CJS))
    return targets


class ManifestBuilder:
    """Builds every entry of a package's ``exports`` map.

    Tasks for all entries run concurrently and settle independently: a
    failing entry is recorded on the returned report and never stops its
    siblings.
    """

    def __init__(
        self,
        *,
        bundler: Bundler,
        declarations: DeclarationGenerator,
        reporter: Optional[Reporter] = None,
        plugins: Sequence[str] = DEFAULT_PLUGINS,
    ) -> None:
        self.bundler = bundler
        self.declarations = declarations
        self.reporter = reporter if reporter is not None else Reporter()
        self.plugins = tuple(plugins)

    async def build(self, root: Union[str, Path], parent_root: Union[str, Path, None] = None) -> BuildReport:
        root = Path(root)
        manifest = await asyncio.to_thread(load_manifest, root)
        plan = manifest.export_plan(manifest_path(root))
        parent = None
        if parent_root is not None:
            parent = await asyncio.to_thread(load_manifest, parent_root)
        external = resolve_external(manifest, parent)

        report = BuildReport(root=root)
        jobs: List[Tuple[TaskOutcome, Awaitable[None]]] = []
        for item in plan:
            if isinstance(item, SkippedExport):
                logger.debug("Skipping export %s: %s", item.key, item.reason)
                report.skipped.append(item)
                continue
            jobs.extend(self._plan_entry(root, item, external))

        results = await asyncio.gather(*(job for _, job in jobs), return_exceptions=True)
        for (outcome, _), result in zip(jobs, results):
            if isinstance(result, BaseException):
                outcome.errors.append(result)
            for error in outcome.errors:
                logger.warning("%s build for %s failed: %s", outcome.kind, outcome.key, error)
            report.outcomes.append(outcome)
        return report

    def _plan_entry(
        self, root: Path, entry: ExportEntry, external: ExternalPredicate
    ) -> List[Tuple[TaskOutcome, Awaitable[None]]]:
        jobs: List[Tuple[TaskOutcome, Awaitable[None]]] = []
        source = resolve_in(root, entry.src)

        targets = output_targets(root, entry)
        if targets:
            outcome = TaskOutcome(key=entry.key, kind=LIBRARY_TASK)
            request = BundleRequest(input=source, output=targets, external=external, plugins=self.plugins)
            jobs.append((outcome, self._build_library(request, outcome)))

        if entry.types:
            outcome = TaskOutcome(key=entry.key, kind=DECLARATIONS_TASK)
            destination = resolve_in(root, entry.types)
            jobs.append((outcome, self._build_declarations(source, destination, outcome)))
        return jobs

    async def _build_library(self, request: BundleRequest, outcome: TaskOutcome) -> None:
        compiled = await self.bundler.compile(request)
        try:
            results = await asyncio.gather(
                *(self._write_target(compiled, target, outcome) for target in request.output),
                return_exceptions=True,
            )
            outcome.errors.extend(result for result in results if isinstance(result, BaseException))
        finally:
            await compiled.close()

    async def _write_target(self, compiled: CompiledBundle, target: OutputTarget, outcome: TaskOutcome) -> None:
        await compiled.write(target)
        outcome.outputs.append(target.file)
        self.reporter.output(target.file, LIBRARY)
        sourcemap = target.sourcemap_file
        if sourcemap is None:
            return
        outcome.outputs.append(sourcemap)
        self.reporter.output(sourcemap, SOURCEMAP)

    async def _build_declarations(self, source: Path, destination: Path, outcome: TaskOutcome) -> None:
        contents = await self._generate([DeclarationEntry(file_path=source)])
        if not contents:
            raise CollaboratorError(f"Declaration generator returned nothing for {source}")
        await asyncio.to_thread(write_text, destination, contents[0])
        outcome.outputs.append(destination)
        self.reporter.output(destination, DECLARATION)

    async def _generate(self, entries: Sequence[DeclarationEntry]) -> Sequence[str]:
        generate = self.declarations.generate
        if inspect.iscoroutinefunction(generate):
            return await generate(entries)
        contents = await asyncio.to_thread(generate, entries)
        if inspect.isawaitable(contents):
            contents = await contents
        return contents


def build_as_manifest(
    root: Union[str, Path],
    monorepo: Union[str, Path, None] = None,
    *,
    bundler: Optional[Bundler] = None,
    declarations: Optional[DeclarationGenerator] = None,
    reporter: Optional[Reporter] = None,
    log: bool = True,
) -> BuildReport:
    """Build library outputs as configured by the ``package.json`` in ``root``.

    Each ``exports`` item names its entry point with a ``src`` property::

        "exports": {
          "./name": {
            "src": "./src/name.ts",
            "types": "./out/name.d.ts",
            "import": "./out/name.js",
            "require": "./out/name.cjs"
          }
        }

    ``monorepo`` points at the workspace root whose dependencies are also
    kept external.
    """

    root = Path(root)
    builder = ManifestBuilder(
        bundler=bundler or CommandBundler(cwd=root),
        declarations=declarations or CommandDeclarationGenerator(cwd=root),
        reporter=reporter if reporter is not None else Reporter(enabled=log),
    )
    return asyncio.run(builder.build(root, monorepo))
