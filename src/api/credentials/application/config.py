"""Business-rule configuration for the API key service."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class APIKeyServiceConfig:
    """Tunable rules enforced by APIKeyService.

    Attributes:
        min_key_name_length: Shortest accepted key name
        max_key_name_length: Longest accepted key name
        max_keys_per_platform: Optional cap on stored records per platform,
            counting deactivated ones
        default_expiration_days: Optional lifetime applied when a key is
            added without an explicit expiration
        allow_multiple_active_keys: Recorded policy only. Adding a key never
            deactivates earlier ones, so several keys may be active for a
            platform regardless of this flag.
    """

    min_key_name_length: int = 3
    max_key_name_length: int = 50
    max_keys_per_platform: int | None = None
    default_expiration_days: int | None = None
    allow_multiple_active_keys: bool = True

    def __post_init__(self) -> None:
        if self.min_key_name_length < 1:
            raise ValueError("min_key_name_length must be >= 1")
        if self.max_key_name_length < self.min_key_name_length:
            raise ValueError(
                f"max_key_name_length ({self.max_key_name_length}) must be >= "
                f"min_key_name_length ({self.min_key_name_length})"
            )
        if self.max_keys_per_platform is not None and self.max_keys_per_platform < 1:
            raise ValueError("max_keys_per_platform must be >= 1 when set")
        if self.default_expiration_days is not None and self.default_expiration_days < 1:
            raise ValueError("default_expiration_days must be >= 1 when set")
