from __future__ import annotations

import pytest

from metrik.calculators.dispatcher import MetricsDispatcher
from metrik.models.enums import Status
from metrik.schemas.execution import Execution
from tests.helpers import _deploy

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def pipeline_stages() -> dict[str, str]:
    """A single pipeline ``p1`` whose ``deploy`` stage is the deployment event."""
    return {"p1": "deploy"}


@pytest.fixture()
def three_runs() -> list[Execution]:
    """Three ``p1`` deployments finishing at 50, 150 and 300.

    Only the run at 150 falls inside the window ``[100, 200]``.
    """
    return [
        _deploy(50, number=1),
        _deploy(150, number=2),
        _deploy(300, number=3),
    ]


@pytest.fixture()
def mixed_history() -> list[Execution]:
    """Four ``p1`` deployments inside ``[0, 1000]``: three succeed, one fails."""
    return [
        _deploy(100, number=1, timestamp=90, commits=[("c1", 10)]),
        _deploy(200, Status.failed, number=2, timestamp=190, commits=[("c2", 150)]),
        _deploy(400, number=3, timestamp=390, commits=[("c3", 350)]),
        _deploy(600, number=4, timestamp=590, commits=[("c4", 500)]),
    ]


@pytest.fixture()
def dispatcher() -> MetricsDispatcher:
    """A dispatcher backed by the default registry."""
    return MetricsDispatcher()
