"""Cache families, their backends, and backend selections."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from cacheadmin.core.exceptions import EmptySelectionError, InvalidEnumError


class BackendId(Enum):
    """Physical storage tiers that can take part in a flush."""

    # Action Cache
    REDIS = "REDIS"
    IN_MEMORY = "IN_MEMORY"
    # CAS
    FILESYSTEM = "FILESYSTEM"
    IN_MEMORY_LRU = "IN_MEMORY_LRU"
    REDIS_WORKER_MAP = "REDIS_WORKER_MAP"

    @property
    def flag(self) -> str:
        """Name of the boolean request field that selects this backend."""
        return _FLAGS[self]

    @property
    def server_key(self) -> str:
        """Key the admin API uses for this backend in result breakdowns."""
        return _SERVER_KEYS[self]


_FLAGS = {
    BackendId.REDIS: "flushRedis",
    BackendId.IN_MEMORY: "flushInMemory",
    BackendId.FILESYSTEM: "flushFilesystem",
    BackendId.IN_MEMORY_LRU: "flushInMemoryLRU",
    BackendId.REDIS_WORKER_MAP: "flushRedisWorkerMap",
}

_SERVER_KEYS = {
    BackendId.REDIS: "redis",
    BackendId.IN_MEMORY: "in-memory",
    BackendId.FILESYSTEM: "filesystem",
    BackendId.IN_MEMORY_LRU: "in-memory-lru",
    BackendId.REDIS_WORKER_MAP: "redis-worker-map",
}


class CacheFamily(Enum):
    """A cache tier with its own flush endpoint.

    The value doubles as the key used in metrics snapshots.
    """

    ACTION_CACHE = "action-cache"
    CAS = "cas"

    @property
    def label(self) -> str:
        return "Action Cache" if self is CacheFamily.ACTION_CACHE else "CAS"

    @property
    def flush_path(self) -> str:
        """Admin API path of this family's flush endpoint."""
        if self is CacheFamily.ACTION_CACHE:
            return "/admin/v1/cache/action/flush"
        return "/admin/v1/cache/cas/flush"

    @property
    def backends(self) -> tuple[BackendId, ...]:
        """Backends belonging to this family, in display order."""
        if self is CacheFamily.ACTION_CACHE:
            return (BackendId.REDIS, BackendId.IN_MEMORY)
        return (
            BackendId.FILESYSTEM,
            BackendId.IN_MEMORY_LRU,
            BackendId.REDIS_WORKER_MAP,
        )

    @property
    def tracks_bytes(self) -> bool:
        """Whether flush results of this family report reclaimed bytes.

        Action Cache entries are not sized.
        """
        return self is CacheFamily.CAS


METRICS_PATH = "/admin/v1/cache/metrics"


@dataclass(frozen=True)
class BackendSelection:
    """Non-empty set of backends of one family taking part in a flush."""

    family: CacheFamily
    backends: frozenset[BackendId]

    def __post_init__(self) -> None:
        """Enforce family membership and non-emptiness."""
        for backend in self.backends:
            if backend not in self.family.backends:
                raise InvalidEnumError("backend", backend.value)
        if not self.backends:
            raise EmptySelectionError(self.family)

    @classmethod
    def of(cls, family: CacheFamily, backends: Iterable[BackendId]) -> "BackendSelection":
        """Create a selection from any iterable of backend ids."""
        return cls(family=family, backends=frozenset(backends))

    def __contains__(self, backend: object) -> bool:
        return backend in self.backends

    def __iter__(self):
        # Family order keeps payloads and logs stable.
        return (b for b in self.family.backends if b in self.backends)

    def __len__(self) -> int:
        return len(self.backends)

    def to_payload(self) -> dict[str, bool]:
        """Return one boolean flag per family backend."""
        return {b.flag: b in self.backends for b in self.family.backends}
