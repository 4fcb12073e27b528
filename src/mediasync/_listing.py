"""Listing sources: where ``/fileinfo`` gets its file set from."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mediasync._path import is_hidden

if TYPE_CHECKING:
    from mediasync._cache import ContentCache
    from mediasync._registry import Registry
    from mediasync._types import JSONObject


class ListingMode(enum.Enum):
    """How the file listing is produced."""

    CACHE = "cache"
    REGISTRY = "registry"


@runtime_checkable
class ListingSource(Protocol):
    """Anything that can produce the current file listing."""

    def list_files(self) -> list[JSONObject]: ...


class CacheListing:
    """Lists the files mirrored in a cache as of the last monitor pass.

    :param cache: The cache the monitors keep in sync.
    """

    def __init__(self, cache: ContentCache) -> None:
        self._cache = cache

    def __repr__(self) -> str:
        return f"CacheListing({self._cache!r})"

    def list_files(self) -> list[JSONObject]:
        nodes = (node for node in self._cache.values() if node.is_regular and not is_hidden(node.path))
        return [node.to_dict() for node in sorted(nodes, key=lambda n: n.path)]


class RegistryListing:
    """Rescans every registered root on each request.

    Always fresh, at the cost of a full scan per call.

    :param registry: Registry of served roots.
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def __repr__(self) -> str:
        return f"RegistryListing({self._registry!r})"

    def list_files(self) -> list[JSONObject]:
        return [obj.to_dict() for obj in self._registry.list_all_files()]


def listing_source(mode: ListingMode | str, *, cache: ContentCache, registry: Registry) -> ListingSource:
    """Pick the listing source for a deployment mode.

    :raises ValueError: If ``mode`` is unknown.
    """
    mode = ListingMode(mode)
    if mode is ListingMode.CACHE:
        return CacheListing(cache)
    return RegistryListing(registry)
