from __future__ import annotations

import ipaddress
import socket
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import psutil

from nodeview.errors import InterfaceResolutionError

AddressTable = Mapping[str, Sequence[Any]]


def _address_table(net_if_addrs: Callable[[], AddressTable] | None) -> AddressTable:
    return (net_if_addrs or psutil.net_if_addrs)()


def strip_cidr(address: str) -> str:
    """Return the dotted-quad form of an IPv4 address, dropping any /prefix suffix."""

    try:
        iface = ipaddress.IPv4Interface(address.strip())
    except ValueError as exc:
        raise InterfaceResolutionError(f"Not an IPv4 address: {address!r}") from exc
    return str(iface.ip)


def primary_ipv4(
    name: str, *, net_if_addrs: Callable[[], AddressTable] | None = None
) -> str:
    """Return the first IPv4 address bound to interface `name`."""

    addrs = _address_table(net_if_addrs).get(name)
    if addrs is None:
        raise InterfaceResolutionError(f"Interface {name!r} not found")

    for addr in addrs:
        if addr.family == socket.AF_INET and addr.address:
            return strip_cidr(addr.address)

    raise InterfaceResolutionError(f"Interface {name!r} has no IPv4 address")


def interface_exists(
    name: str, *, net_if_addrs: Callable[[], AddressTable] | None = None
) -> bool:
    return name in _address_table(net_if_addrs)
