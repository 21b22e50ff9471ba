from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from nodeview.errors import ConfigError
from nodeview.interfaces import interface_exists


class ConsulConfig(BaseModel):
    """How to reach the Consul agent running next to this process.

    The agent host is always the resolved local interface address; only the port and
    transport details are configurable.
    """

    model_config = ConfigDict(frozen=True)

    port: int = Field(default=8500, ge=1, le=65535)
    use_ssl: bool = Field(default=False)
    token: str | None = Field(default=None, description="ACL token sent as X-Consul-Token")
    timeout_s: float | None = Field(
        default=None,
        gt=0,
        description="Bound on the catalog request. None waits indefinitely.",
    )
    verify: bool = Field(default=True, description="Verify the agent TLS certificate")
    ca_cert: str | None = Field(default=None, description="CA bundle file for the agent")
    ca_path: str | None = Field(default=None, description="Directory of CA certificates")
    client_cert: str | None = Field(default=None, description="Client certificate (PEM)")
    client_key: str | None = Field(default=None, description="Key for client_cert (PEM)")
    http_auth: str | None = Field(default=None, description="HTTP basic auth, user[:password]")

    @model_validator(mode="after")
    def _key_needs_cert(self) -> ConsulConfig:
        if self.client_key and not self.client_cert:
            raise ValueError("client_key requires client_cert")
        return self

    @property
    def scheme(self) -> str:
        return "https" if self.use_ssl else "http"


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    file: str | None = Field(default=None, description="Optional log file, rolled by size.")
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class StatusPageConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    iface: str = Field(min_length=1)
    datacenter: str = Field(min_length=1)
    bind_host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)
    web_prefix: str = Field(default="web", min_length=1)
    consul: ConsulConfig = Field(default_factory=ConsulConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# environment variable -> (section, field); section None means top level
_ENV_FIELDS: dict[str, tuple[str | None, str]] = {
    "IFACE": (None, "iface"),
    "DATACENTER": (None, "datacenter"),
    "PORT": (None, "port"),
    "BIND_HOST": (None, "bind_host"),
    "WEB_PREFIX": (None, "web_prefix"),
    "CONSUL_PORT": ("consul", "port"),
    "CONSUL_HTTP_SSL": ("consul", "use_ssl"),
    "CONSUL_HTTP_TOKEN": ("consul", "token"),
    "CONSUL_TIMEOUT_S": ("consul", "timeout_s"),
    "CONSUL_HTTP_SSL_VERIFY": ("consul", "verify"),
    "CONSUL_CACERT": ("consul", "ca_cert"),
    "CONSUL_CAPATH": ("consul", "ca_path"),
    "CONSUL_CLIENT_CERT": ("consul", "client_cert"),
    "CONSUL_CLIENT_KEY": ("consul", "client_key"),
    "CONSUL_HTTP_AUTH": ("consul", "http_auth"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FILE": ("logging", "file"),
    "LOG_MAX_SIZE_MB": ("logging", "max_size_mb"),
    "LOG_BACKUP_COUNT": ("logging", "backup_count"),
}


def _raw_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    raw: dict[str, Any] = {}
    for name, (section, field) in _ENV_FIELDS.items():
        value = (env.get(name) or "").strip()
        if not value:
            continue
        target = raw if section is None else raw.setdefault(section, {})
        target[field] = value
    return raw


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    check_interface: Callable[[str], bool] = interface_exists,
) -> StatusPageConfig:
    """Build the process configuration from environment variables.

    - IFACE and DATACENTER are required; IFACE must name an existing interface.
    - Empty values are treated as unset.
    - Any failure is raised as ConfigError with a message fit for the startup log.
    """

    env = os.environ if environ is None else environ
    raw = _raw_from_env(env)

    if "iface" not in raw:
        raise ConfigError("Missing environment variable 'IFACE'")
    if not check_interface(raw["iface"]):
        raise ConfigError(f"Interface '{raw['iface']}' doesn't exist")
    if "datacenter" not in raw:
        raise ConfigError("Missing environment variable 'DATACENTER'")

    try:
        return StatusPageConfig.model_validate(raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from exc
