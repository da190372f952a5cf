"""Scope resolver - turns raw form input into a validated Scope."""

from cacheadmin.core.entities.scope import Scope, ScopeKind
from cacheadmin.core.exceptions import InvalidEnumError, MissingFieldError


def resolve_scope(
    raw_scope: str | None,
    raw_instance: str | None = None,
    raw_digest_prefix: str | None = None,
) -> Scope:
    """Validate and normalize a user-specified flush scope.

    Must run before any request is built. Only the field the scope
    requires is kept; the others are ignored.

    Args:
        raw_scope: One of ``"ALL"``, ``"INSTANCE"`` or ``"DIGEST_PREFIX"``.
        raw_instance: Instance name, required for INSTANCE.
        raw_digest_prefix: Digest prefix, required for DIGEST_PREFIX.

    Returns:
        The validated Scope, with its field trimmed.

    Raises:
        MissingFieldError: If the scope token is blank, or the field the
            scope requires is missing or whitespace-only.
        InvalidEnumError: If the scope token is not recognized.
    """
    token = (raw_scope or "").strip()
    if not token:
        raise MissingFieldError("scope")

    try:
        kind = ScopeKind(token)
    except ValueError:
        raise InvalidEnumError("scope", raw_scope) from None

    if kind is ScopeKind.INSTANCE:
        instance = (raw_instance or "").strip()
        if not instance:
            raise MissingFieldError("instanceName")
        return Scope.instance(instance)

    if kind is ScopeKind.DIGEST_PREFIX:
        prefix = (raw_digest_prefix or "").strip()
        if not prefix:
            raise MissingFieldError("digestPrefix")
        return Scope.prefix(prefix)

    return Scope.all()
