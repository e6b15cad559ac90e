"""Console formatting helpers for paths, moves and durations."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, replace
from typing import Optional

import click


@dataclass(frozen=True, slots=True)
class Style:
    """Subset of ``click.style`` keywords applied to one fragment."""

    fg: Optional[str] = None
    dim: bool = False
    bold: bool = False

    def dimmed(self) -> "Style":
        return replace(self, dim=True)


DIM = Style(dim=True)
TAG = Style(fg="green", dim=True)
NUMBER = Style(fg="cyan")
LIBRARY = Style(fg="yellow")
SOURCEMAP = Style(fg="bright_yellow", dim=True)
DECLARATION = Style(fg="blue")
SYNCED = Style(fg="magenta")


@dataclass(frozen=True, slots=True)
class Palette:
    """Colour capability passed explicitly to every formatter."""

    enabled: bool = True

    def paint(self, text: str, style: Style) -> str:
        if not self.enabled:
            return text
        return click.style(
            text,
            fg=style.fg,
            dim=True if style.dim else None,
            bold=True if style.bold else None,
        )

    def dim(self, text: str) -> str:
        return self.paint(text, DIM)


PLAIN = Palette(enabled=False)


@dataclass(frozen=True, slots=True)
class PathDiff:
    """Shared prefix of two paths and the diverging remainder of each."""

    common: str
    from_: str
    to: str


def diff_path(from_: str, to: str) -> PathDiff:
    """Split two paths at the first segment where they differ."""

    from_parts = from_.split(os.sep)
    to_parts = to.split(os.sep)
    for index in range(max(len(from_parts), len(to_parts))):
        left = from_parts[index] if index < len(from_parts) else None
        right = to_parts[index] if index < len(to_parts) else None
        if left != right:
            return PathDiff(
                common=os.sep.join(from_parts[:index]),
                from_=os.sep.join(from_parts[index:]),
                to=os.sep.join(to_parts[index:]),
            )
    return PathDiff(common=from_, from_="", to="")


def format_path(raw: str, style: Style, palette: Palette = PLAIN) -> str:
    """Render a path with a dimmed parent directory and a styled name."""

    directory, name = os.path.split(raw)
    if directory == "":
        return palette.paint(name, style)
    return f"{palette.dim(directory)}{palette.dim(os.sep)}{palette.paint(name, style)}"


def format_move(from_: str, to: str, style: Style, palette: Palette = PLAIN) -> str:
    """Render a move between two paths as ``common (from => to)``."""

    diff = diff_path(from_, to)
    source = diff.from_ or "."
    target = diff.to or "."
    if source == "." and target == ".":
        return f"{format_path(diff.common, style, palette)} {palette.dim('(self)')}"
    return "".join(
        [
            palette.dim(diff.common),
            palette.dim(" ("),
            format_path(source, style.dimmed(), palette),
            palette.dim(" => "),
            format_path(target, style, palette),
            palette.dim(")"),
        ]
    )


def format_duration(started: float, palette: Palette = PLAIN, *, now: Optional[float] = None) -> str:
    """Render the time elapsed since ``started`` (``time.monotonic`` seconds).

    Only milliseconds or seconds plus milliseconds are ever shown.
    """

    finished = time.monotonic() if now is None else now
    duration = max(0, int(round((finished - started) * 1000)))
    if duration < 1000:
        return f"{palette.paint(str(duration), NUMBER)} {palette.dim('ms')}"
    seconds, millis = divmod(duration, 1000)
    return (
        f"{palette.paint(str(seconds), NUMBER)} {palette.dim('s')} "
        f"{palette.paint(str(millis), NUMBER)} {palette.dim('ms')}"
    )
