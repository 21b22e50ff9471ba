from __future__ import annotations


class NodeviewError(Exception):
    """Base class for nodeview errors."""


class ConfigError(NodeviewError):
    """Startup configuration is missing or invalid. Fatal."""


class StatusPageError(NodeviewError):
    """A request-time failure that degrades to a plain-text body."""

    message: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail

    @property
    def body(self) -> str:
        return f"{self.message}\n"


class InterfaceResolutionError(StatusPageError):
    message = "Failed to get local IP"


class ProviderConnectionError(StatusPageError):
    message = "Failed to connect to Consul"


class ProviderQueryError(StatusPageError):
    message = "Failed to get Consul nodes"


class TemplateRenderError(StatusPageError):
    message = "Failed to render template"
