"""Command-line entry point for manifest-driven builds."""

from __future__ import annotations

import argparse
import logging
import time
from typing import Optional, Sequence

import click

from .bundle.builder import BuildReport, build_as_manifest
from .bundle.collaborators import CommandBundler, CommandDeclarationGenerator
from .config import BuildSettings, load_settings
from .errors import AutoBuildError
from .format import Style, format_duration
from .reporting import Reporter
from .sync import sync_contributors, sync_license


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings(
        root=args.root,
        monorepo=args.monorepo,
        log=False if args.quiet else None,
        color=False if args.no_color else None,
        bundler_command=getattr(args, "bundler", None),
        declaration_command=getattr(args, "declarations", None),
        strict=True if getattr(args, "strict", False) else None,
        sync=False if getattr(args, "skip_sync", False) else None,
    )
    reporter = settings.reporter()

    try:
        if args.command == "build":
            return _handle_build(settings, reporter)
        if args.command == "sync":
            return _handle_sync(settings, reporter)
        if args.command == "all":
            return _handle_all(settings, reporter)
    except AutoBuildError as exc:
        click.echo(f"error: {exc}", err=True)
        return 1

    parser.error(f"Unknown command '{args.command}'")
    return 1


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root", help="Folder holding the package.json to build (default: cwd).")
    common.add_argument("--monorepo", help="Workspace root (default: parent of root when it has a package.json).")
    common.add_argument("--quiet", action="store_true", help="Do not report produced files.")
    common.add_argument("--no-color", action="store_true")
    common.add_argument("--verbose", action="store_true")

    build_options = argparse.ArgumentParser(add_help=False)
    build_options.add_argument("--bundler", help="Bundler command template.")
    build_options.add_argument("--declarations", help="Declaration generator command template.")
    build_options.add_argument("--strict", action="store_true", help="Exit non-zero when any task fails.")

    parser = argparse.ArgumentParser(prog="auto-build", description="Manifest-driven library builds.")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("build", parents=[common, build_options], help="Build every export entry.")
    subparsers.add_parser("sync", parents=[common], help="Sync LICENSE and CONTRIBUTORS.yaml from the monorepo.")
    run_all = subparsers.add_parser("all", parents=[common, build_options], help="Build, then sync.")
    run_all.add_argument("--skip-sync", action="store_true", help="Only build.")
    return parser


def _build(settings: BuildSettings, reporter: Reporter) -> BuildReport:
    return build_as_manifest(
        settings.root,
        settings.monorepo,
        bundler=CommandBundler(settings.bundler_command, cwd=settings.root),
        declarations=CommandDeclarationGenerator(settings.declaration_command, cwd=settings.root),
        reporter=reporter,
    )


def _exit_code(settings: BuildSettings, report: BuildReport) -> int:
    return 1 if settings.strict and not report.ok else 0


def _handle_build(settings: BuildSettings, reporter: Reporter) -> int:
    report = _build(settings, reporter)
    return _exit_code(settings, report)


def _handle_sync(settings: BuildSettings, reporter: Reporter) -> int:
    if settings.monorepo is None:
        raise AutoBuildError("sync requires --monorepo or a package.json in the parent folder")
    sync_license(settings.root, settings.monorepo, reporter)
    sync_contributors(settings.root, settings.monorepo, reporter)
    return 0


def _handle_all(settings: BuildSettings, reporter: Reporter) -> int:
    palette = settings.palette
    started = time.monotonic()
    reporter.line(palette.paint("generating output...", Style(fg="blue")))

    report = _build(settings, reporter)
    if settings.sync and settings.monorepo is not None:
        _handle_sync(settings, reporter)

    duration = format_duration(started, palette)
    reporter.line(f"{palette.paint('done', Style(fg='green'))} {palette.dim('in')} {duration}")
    reporter.line("")
    return _exit_code(settings, report)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
