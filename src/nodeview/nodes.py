from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import partial
from typing import Protocol

DEFAULT_WEB_PREFIX = "web"


class NamedAddress(Protocol):
    name: str
    address: str


@dataclass(frozen=True)
class Node:
    name: str
    address: str
    current: bool = False


@dataclass
class PageData:
    web_nodes: list[Node] = field(default_factory=list)
    other_nodes: list[Node] = field(default_factory=list)


def is_web_node(name: str, prefix: str = DEFAULT_WEB_PREFIX) -> bool:
    return name.startswith(prefix)


def web_predicate(prefix: str) -> Callable[[str], bool]:
    return partial(is_web_node, prefix=prefix)


def classify_nodes(
    catalog_nodes: Iterable[NamedAddress],
    local_ip: str,
    *,
    is_web: Callable[[str], bool] = is_web_node,
) -> PageData:
    """Split catalog nodes into web and other nodes, keeping catalog order.

    Only web nodes can be current: the one whose address equals `local_ip`.
    """

    data = PageData()
    for node in catalog_nodes:
        if is_web(node.name):
            data.web_nodes.append(
                Node(name=node.name, address=node.address, current=node.address == local_ip)
            )
        else:
            data.other_nodes.append(Node(name=node.name, address=node.address))
    return data
