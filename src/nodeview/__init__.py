from nodeview.config import StatusPageConfig, load_config
from nodeview.errors import ConfigError, StatusPageError
from nodeview.nodes import Node, PageData, classify_nodes, is_web_node

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Node",
    "PageData",
    "StatusPageConfig",
    "StatusPageError",
    "__version__",
    "classify_nodes",
    "is_web_node",
    "load_config",
]
