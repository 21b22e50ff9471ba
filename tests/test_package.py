from __future__ import annotations

import nodeview
from nodeview.app import create_app
from nodeview.config import StatusPageConfig


def test_public_exports_and_version(config: StatusPageConfig) -> None:
    assert nodeview.__version__ == "0.1.0"
    for name in nodeview.__all__:
        assert hasattr(nodeview, name)

    assert create_app(config).version == nodeview.__version__
