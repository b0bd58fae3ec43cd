"""
Batcher configuration.

Options are validated once, when the batcher is constructed, and never
change afterwards.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt
from pydantic import ValidationError as PydanticValidationError

from work_batcher.errors import ConfigurationError

_TRUTHY = ("1", "true", "yes", "on")


class BatcherConfig(BaseModel):
    """Configuration for a ``WorkBatcher``.

    Attributes:
        size_limit: Queue size that triggers immediate processing (None disables)
        time_limit: Maximum seconds between the first queued item and processing
        deduplicate: Keep only the latest item per deduplication key
        deduplicator: Maps an item to its deduplication key (identity if None)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    size_limit: PositiveInt | None = Field(
        default=None, description="Queue size that triggers immediate processing"
    )
    time_limit: PositiveFloat = Field(
        default=5.0,
        le=threading.TIMEOUT_MAX,
        description="Maximum wait in seconds before processing",
    )
    deduplicate: bool = Field(default=False, description="Deduplicate queued items")
    deduplicator: Callable[[Any], Any] | None = Field(
        default=None, description="Deduplication key function"
    )

    @classmethod
    def default(cls) -> BatcherConfig:
        """Create default configuration."""
        return cls()

    @classmethod
    def create(cls, **options: Any) -> BatcherConfig:
        """Create a configuration, reporting invalid options as ConfigurationError.

        Raises:
            ConfigurationError: If an option is unknown or invalid
        """
        try:
            return cls(**options)
        except PydanticValidationError as e:
            first = e.errors()[0]
            option = ".".join(str(part) for part in first["loc"]) or None
            raise ConfigurationError(
                f"Invalid batcher option: {first['msg']}",
                option=option,
                value=first.get("input"),
            ) from e

    @classmethod
    def from_env(cls) -> BatcherConfig:
        """Create configuration from environment variables.

        Reads ``WORK_BATCHER_SIZE_LIMIT``, ``WORK_BATCHER_TIME_LIMIT`` and
        ``WORK_BATCHER_DEDUPLICATE``; unset variables keep their defaults.
        """
        options: dict[str, Any] = {}

        size_limit = os.getenv("WORK_BATCHER_SIZE_LIMIT")
        if size_limit:
            options["size_limit"] = size_limit

        time_limit = os.getenv("WORK_BATCHER_TIME_LIMIT")
        if time_limit:
            options["time_limit"] = time_limit

        deduplicate = os.getenv("WORK_BATCHER_DEDUPLICATE")
        if deduplicate:
            options["deduplicate"] = deduplicate.strip().lower() in _TRUTHY

        return cls.create(**options)

    def merged(self, **overrides: Any) -> BatcherConfig:
        """Return a validated copy with ``overrides`` applied."""
        if not overrides:
            return self
        return self.create(**{**self.model_dump(), **overrides})
