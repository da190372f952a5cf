"""Flush scope value object."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from cacheadmin.core.exceptions import MissingFieldError


class ScopeKind(Enum):
    """Breadth of a flush.

    ALL: Every entry in the selected backends.
    INSTANCE: Entries belonging to one instance namespace.
    DIGEST_PREFIX: Entries whose digest starts with a prefix.
    """

    ALL = "ALL"
    INSTANCE = "INSTANCE"
    DIGEST_PREFIX = "DIGEST_PREFIX"


@dataclass(frozen=True)
class Scope:
    """Immutable tagged scope.

    Carries exactly the field its kind requires. Use the ``all``,
    ``instance`` and ``prefix`` factories rather than the
    constructor.
    """

    kind: ScopeKind
    instance_name: str | None = None
    digest_prefix: str | None = None

    def __post_init__(self) -> None:
        """Reject scopes whose required field is missing or blank."""
        if self.kind is ScopeKind.INSTANCE:
            if not self.instance_name or not self.instance_name.strip():
                raise MissingFieldError("instanceName")
            if self.digest_prefix is not None:
                raise ValueError("INSTANCE scope does not take a digest prefix")
        elif self.kind is ScopeKind.DIGEST_PREFIX:
            if not self.digest_prefix or not self.digest_prefix.strip():
                raise MissingFieldError("digestPrefix")
            if self.instance_name is not None:
                raise ValueError("DIGEST_PREFIX scope does not take an instance name")
        elif self.instance_name is not None or self.digest_prefix is not None:
            raise ValueError("ALL scope takes no further fields")

    @classmethod
    def all(cls) -> "Scope":
        """Create an unscoped (whole backend) scope."""
        return cls(kind=ScopeKind.ALL)

    @classmethod
    def instance(cls, name: str) -> "Scope":
        """Create a scope limited to one instance namespace.

        The name is stored trimmed.
        """
        return cls(kind=ScopeKind.INSTANCE, instance_name=(name or "").strip())

    @classmethod
    def prefix(cls, digest_prefix: str) -> "Scope":
        """Create a scope limited to digests starting with ``digest_prefix``."""
        return cls(
            kind=ScopeKind.DIGEST_PREFIX, digest_prefix=(digest_prefix or "").strip()
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the scope fields of a flush request body."""
        payload: dict[str, Any] = {"scope": self.kind.value}
        if self.kind is ScopeKind.INSTANCE:
            payload["instanceName"] = self.instance_name
        elif self.kind is ScopeKind.DIGEST_PREFIX:
            payload["digestPrefix"] = self.digest_prefix
        return payload

    def __str__(self) -> str:
        if self.kind is ScopeKind.INSTANCE:
            return f"INSTANCE({self.instance_name})"
        if self.kind is ScopeKind.DIGEST_PREFIX:
            return f"DIGEST_PREFIX({self.digest_prefix})"
        return self.kind.value
