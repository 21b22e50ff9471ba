from __future__ import annotations

import pytest

from nodeview.config import StatusPageConfig


@pytest.fixture()
def config() -> StatusPageConfig:
    return StatusPageConfig(iface="eth0", datacenter="dc1")
