from __future__ import annotations

from typing import List

import pytest

from auto_build.reporting import Reporter


@pytest.fixture()
def lines() -> List[str]:
    return []


@pytest.fixture()
def reporter(lines: List[str]) -> Reporter:
    """Reporter that keeps emitted lines instead of printing them."""

    return Reporter(echo=lines.append)
