"""Store configuration for pyfieldstore."""

from __future__ import annotations

import dataclasses
import os
from typing import Any


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Behaviour switches for :class:`pyfieldstore.store.FieldStore`.

    Parameters
    ----------
    copy_on_write : bool
        Write through :func:`~pyfieldstore.values.set_value_copy` and
        :func:`~pyfieldstore.values.set_values_copy`, so snapshots handed out
        earlier are never modified by later writes.
    clone_reads : bool
        Return deep copies from ``get_fields_value``.  Disable only when the
        caller promises not to mutate what it reads.
    log_values : bool
        Include (redacted) values in DEBUG logs, not only the paths.
    """

    copy_on_write: bool = False
    clone_reads: bool = True
    log_values: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from ``FIELDSTORE_*`` environment variables.

        Unparseable values fall back to the field default.  Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FIELDSTORE_COPY_ON_WRITE": "copy_on_write",
            "FIELDSTORE_CLONE_READS": "clone_reads",
            "FIELDSTORE_LOG_VALUES": "log_values",
        }
        defaults = {field.name: field.default for field in dataclasses.fields(cls)}
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            if field_name in overrides:
                continue
            config_kwargs[field_name] = _env_bool(env.get(env_key), defaults[field_name])

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
