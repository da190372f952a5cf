"""Admin client configuration entity."""

import os
from dataclasses import dataclass, field


@dataclass
class AdminClientConfig:
    """Admin client configuration.

    Provides the admin API location, request timeout, the metrics poll
    interval and the user-facing strings shared by the flush forms.
    """

    base_url: str = "http://localhost:8980"
    timeout: float = 10.0  # Seconds per request
    poll_interval: float = 30.0  # Seconds between metrics ticks
    unknown_error_message: str = "Unknown error occurred"
    busy_label: str = "Processing..."
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize the base URL and reject non-positive intervals."""
        self.base_url = self.base_url.rstrip("/")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

    @classmethod
    def from_env(cls, prefix: str = "CACHEADMIN_") -> "AdminClientConfig":
        """Build a config from environment variables.

        Reads ``<prefix>BASE_URL``, ``<prefix>TIMEOUT`` and
        ``<prefix>POLL_INTERVAL``; unset variables keep their defaults.
        """
        defaults = cls()
        return cls(
            base_url=os.getenv(f"{prefix}BASE_URL", defaults.base_url),
            timeout=float(os.getenv(f"{prefix}TIMEOUT", defaults.timeout)),
            poll_interval=float(
                os.getenv(f"{prefix}POLL_INTERVAL", defaults.poll_interval)
            ),
        )
