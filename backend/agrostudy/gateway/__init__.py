"""Remote data gateway and object storage bindings."""

from agrostudy.gateway.base import (
    Join,
    ObjectStorage,
    OrderBy,
    RemoteDataGateway,
    Row,
)
from agrostudy.gateway.memory import InMemoryGateway, InMemoryObjectStorage

__all__ = [
    "InMemoryGateway",
    "InMemoryObjectStorage",
    "Join",
    "ObjectStorage",
    "OrderBy",
    "RemoteDataGateway",
    "Row",
]
