from __future__ import annotations

import json
import socket
from collections.abc import Callable
from typing import Any, NamedTuple

import httpx

from nodeview.config import StatusPageConfig
from nodeview.consul import ConsulCatalog


class FakeAddr(NamedTuple):
    family: int
    address: str
    netmask: str | None = None
    broadcast: str | None = None
    ptp: str | None = None


def ipv4(address: str) -> FakeAddr:
    return FakeAddr(socket.AF_INET, address, "255.255.255.0")


def ipv6(address: str) -> FakeAddr:
    return FakeAddr(socket.AF_INET6, address)


def catalog_payload(*nodes: tuple[str, str]) -> list[dict[str, Any]]:
    return [
        {
            "ID": f"00000000-0000-0000-0000-{i:012d}",
            "Node": name,
            "Address": address,
            "Datacenter": "dc1",
            "TaggedAddresses": {"lan": address, "wan": address},
            "Meta": {"consul-network-segment": ""},
        }
        for i, (name, address) in enumerate(nodes)
    ]


def catalog_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[str, StatusPageConfig], ConsulCatalog]:
    transport = httpx.MockTransport(handler)

    def factory(local_ip: str, config: StatusPageConfig) -> ConsulCatalog:
        return ConsulCatalog.from_config(local_ip, config, transport=transport)

    return factory


def json_handler(payload: Any, *, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))

    return handler
