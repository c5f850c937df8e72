"""Change events emitted by :class:`pyfieldstore.store.FieldStore`.

Every public write on a store produces exactly one event, however many
containers it touched; writes grouped with ``FieldStore.batch()`` share a
single event.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyfieldstore.paths import is_parent_name_path, normalize_path


class ChangeSource(StrEnum):
    SET = "set"
    MERGE = "merge"
    RESET = "reset"
    BATCH = "batch"


class StoreChangeEvent(BaseModel):
    """A committed change to a store."""

    model_config = ConfigDict(frozen=True)

    source: ChangeSource
    name_paths: tuple[tuple[Any, ...], ...] = Field(
        default=(),
        description="Changed name paths, in the order they were first written.",
    )
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("name_paths", mode="before")
    @classmethod
    def _freeze_paths(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(tuple(path) for path in value)
        return value

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def touches(self, name: Any) -> bool:
        """Return True if *name* is, contains, or lies inside a changed path."""
        name_path = normalize_path(name)
        return any(
            is_parent_name_path(name_path, changed) or is_parent_name_path(changed, name_path)
            for changed in self.name_paths
        )
