from __future__ import annotations

import logging
import ssl
from types import TracebackType
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from nodeview.errors import ProviderConnectionError, ProviderQueryError

if TYPE_CHECKING:
    from nodeview.config import ConsulConfig, StatusPageConfig

logger = logging.getLogger(__name__)

TOKEN_HEADER: Final[str] = "X-Consul-Token"
CATALOG_NODES_PATH: Final[str] = "/v1/catalog/nodes"


class CatalogNode(BaseModel):
    """One entry of the agent's /v1/catalog/nodes response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(alias="Node")
    address: str = Field(alias="Address")


_CATALOG_NODES = TypeAdapter(list[CatalogNode])


def ssl_verify(consul: ConsulConfig) -> ssl.SSLContext | bool:
    """Translate the agent TLS settings into an httpx `verify` value.

    Returns True (httpx default trust store) when nothing is customised.
    """

    custom = consul.ca_cert or consul.ca_path or consul.client_cert
    if not custom:
        return consul.verify

    try:
        context = ssl.create_default_context(cafile=consul.ca_cert, capath=consul.ca_path)
        if not consul.verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        if consul.client_cert:
            context.load_cert_chain(consul.client_cert, consul.client_key)
    except OSError as exc:
        raise ProviderConnectionError(f"Cannot load Consul TLS material: {exc}") from exc
    return context


def basic_auth(raw: str | None) -> httpx.BasicAuth | None:
    if not raw:
        return None
    username, _, password = raw.partition(":")
    return httpx.BasicAuth(username, password)


class ConsulCatalog:
    """Read-only client for the Consul catalog of a single agent."""

    def __init__(
        self,
        address: str,
        datacenter: str,
        *,
        scheme: str = "http",
        token: str | None = None,
        timeout: float | None = None,
        verify: ssl.SSLContext | bool = True,
        auth: httpx.Auth | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.address = address
        self.datacenter = datacenter

        headers = {"Accept": "application/json"}
        if token:
            headers[TOKEN_HEADER] = token

        try:
            self._client = httpx.Client(
                base_url=f"{scheme}://{address}",
                headers=headers,
                timeout=timeout,
                verify=verify,
                auth=auth,
                transport=transport,
            )
        except (httpx.InvalidURL, ValueError) as exc:
            raise ProviderConnectionError(f"Invalid Consul address {address!r}: {exc}") from exc

    @classmethod
    def from_config(
        cls,
        local_ip: str,
        config: StatusPageConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> ConsulCatalog:
        return cls(
            f"{local_ip}:{config.consul.port}",
            config.datacenter,
            scheme=config.consul.scheme,
            token=config.consul.token,
            timeout=config.consul.timeout_s,
            verify=ssl_verify(config.consul),
            auth=basic_auth(config.consul.http_auth),
            transport=transport,
        )

    def list_nodes(self) -> list[CatalogNode]:
        """Return every node the catalog knows about, in response order."""

        try:
            response = self._client.get(CATALOG_NODES_PATH, params={"dc": self.datacenter})
            response.raise_for_status()
            payload = response.json()
            if payload is None:
                payload = []
        except httpx.HTTPError as exc:
            raise ProviderQueryError(f"Catalog request to {self.address} failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderQueryError(f"Catalog response is not JSON: {exc}") from exc

        try:
            nodes = _CATALOG_NODES.validate_python(payload)
        except ValidationError as exc:
            raise ProviderQueryError(f"Unexpected catalog payload: {exc}") from exc

        logger.debug(
            "Catalog %s (dc=%s) returned %d nodes", self.address, self.datacenter, len(nodes)
        )
        return nodes

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ConsulCatalog:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
