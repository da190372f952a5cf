"""Backend selector - turns per-backend flags into a BackendSelection."""

from collections.abc import Mapping

from cacheadmin.core.entities.backend import BackendId, BackendSelection, CacheFamily
from cacheadmin.core.exceptions import EmptySelectionError, InvalidEnumError


def resolve_backends(
    family: CacheFamily,
    flags: Mapping[BackendId | str, bool],
) -> BackendSelection:
    """Validate which backends take part in a flush.

    Keys may be BackendId members or their names (``"REDIS"``,
    ``"IN_MEMORY_LRU"`` ...). Backends of the family that are not in
    ``flags`` count as unselected.

    Args:
        family: The cache family being flushed.
        flags: Selection flag per backend.

    Returns:
        The set of backends whose flag is true.

    Raises:
        InvalidEnumError: If a key does not name a backend of ``family``.
        EmptySelectionError: If no backend is selected.
    """
    selected: set[BackendId] = set()
    for key, enabled in flags.items():
        backend = _parse_backend(key)
        if backend not in family.backends:
            raise InvalidEnumError("backend", key)
        if enabled:
            selected.add(backend)

    if not selected:
        raise EmptySelectionError(family)

    return BackendSelection.of(family, selected)


def _parse_backend(key: BackendId | str) -> BackendId:
    if isinstance(key, BackendId):
        return key
    try:
        return BackendId(str(key).strip().upper())
    except ValueError:
        raise InvalidEnumError("backend", key) from None
