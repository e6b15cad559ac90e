"""User-facing artifact reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Union

import click

from .format import PLAIN, TAG, Palette, Style, format_move, format_path

OUTPUT = "output"
SYNC = "sync"


def _echo(line: str) -> None:
    click.echo(line)


@dataclass(slots=True)
class Reporter:
    """Writes ``<tag> <formatted-path>`` lines for produced artifacts.

    A disabled reporter drops every line; callers never check the flag
    themselves.
    """

    enabled: bool = True
    palette: Palette = PLAIN
    echo: Callable[[str], None] = field(default=_echo)

    def line(self, text: str) -> None:
        if self.enabled:
            self.echo(text)

    def output(self, path: Union[str, Path], style: Style) -> None:
        self._tagged(OUTPUT, format_path(str(path), style, self.palette))

    def sync(self, source: Union[str, Path], target: Union[str, Path], style: Style) -> None:
        self._tagged(SYNC, format_move(str(source), str(target), style, self.palette))

    def _tagged(self, tag: str, rendered: str) -> None:
        self.line(f"{self.palette.paint(tag, TAG)} {rendered}")


