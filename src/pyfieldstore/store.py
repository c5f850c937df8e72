"""In-memory form store.

:class:`FieldStore` owns one store tree plus the initial values it was
created with, and notifies subscribers after every committed change.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from pyfieldstore._redact import redact_path_value
from pyfieldstore.batch import MutationBatch, mutation_batch, record_mutation
from pyfieldstore.config import StoreConfig
from pyfieldstore.events import ChangeSource, StoreChangeEvent
from pyfieldstore.paths import format_name_path, normalize_path
from pyfieldstore.values import (
    clone_by_name_path_list,
    get_value,
    set_value,
    set_value_copy,
    set_values,
    set_values_copy,
)

_logger = logging.getLogger(__name__)

ChangeCallback = Callable[[StoreChangeEvent], None]


@dataclasses.dataclass(frozen=True, eq=False)
class _Subscriber:
    callback: ChangeCallback
    name_paths: tuple[Any, ...] | None

    def wants(self, event: StoreChangeEvent) -> bool:
        if self.name_paths is None:
            return True
        return any(event.touches(name_path) for name_path in self.name_paths)


class FieldStore:
    """Form values addressed by name path.

    Existing containers are updated in place unless
    ``StoreConfig.copy_on_write`` is set, in which case every write builds a
    new root and previously returned snapshots stay untouched.

    Every public write emits exactly one :class:`StoreChangeEvent`; writes
    made inside :meth:`batch` (or inside an outer
    :func:`pyfieldstore.batch.mutation_batch`) are folded into one.
    """

    def __init__(
        self,
        initial_values: Mapping[str, Any] | None = None,
        *,
        config: StoreConfig | None = None,
    ) -> None:
        self._config = config or StoreConfig()
        self._initial_values: dict[str, Any] = copy.deepcopy(dict(initial_values)) if initial_values else {}
        self._store: Any = copy.deepcopy(self._initial_values)
        self._subscribers: list[_Subscriber] = []
        self._pending: list[ChangeSource] = []
        self._pending_batch: MutationBatch | None = None

    @property
    def config(self) -> StoreConfig:
        return self._config

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_field_value(self, name: Any) -> Any:
        value = get_value(self._store, normalize_path(name))
        return copy.deepcopy(value) if self._config.clone_reads else value

    def get_fields_value(self, name_list: Iterable[Any] | None = None) -> Any:
        """Return the whole store, or only the fields in *name_list*.

        A partial read is always a fresh copy; a full read is deep-copied
        unless ``clone_reads`` is disabled.
        """
        if name_list is None:
            return copy.deepcopy(self._store) if self._config.clone_reads else self._store
        return clone_by_name_path_list(self._store, [normalize_path(name) for name in name_list])

    def get_initial_value(self, name: Any) -> Any:
        return copy.deepcopy(get_value(self._initial_values, normalize_path(name)))

    def is_field_changed(self, name: Any) -> bool:
        name_path = normalize_path(name)
        return get_value(self._store, name_path) != get_value(self._initial_values, name_path)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_field_value(self, name: Any, value: Any) -> None:
        name_path = normalize_path(name)
        with self._transaction(ChangeSource.SET):
            self._write(name_path, copy.deepcopy(value))
        self._log_write("Set", name_path, value)

    def set_fields_value(self, values: Mapping[str, Any] | None) -> None:
        """Merge *values* into the store (plain dicts merge, everything else replaces).

        The patch is deep-copied first; the store never shares containers
        with its callers.
        """
        merge = set_values_copy if self._config.copy_on_write else set_values
        with self._transaction(ChangeSource.MERGE):
            self._store = merge(self._store, copy.deepcopy(values), owner=self)
        self._log_write("Merged", [], values)

    def reset_fields(self, name_list: Iterable[Any] | None = None) -> None:
        """Restore initial values, for every field or only those in *name_list*."""
        names = None if name_list is None else [normalize_path(name) for name in name_list]
        with self._transaction(ChangeSource.RESET):
            if names is None:
                self._store = copy.deepcopy(self._initial_values)
                record_mutation([], owner=self)
            else:
                for name_path in names:
                    self._write(name_path, self.get_initial_value(name_path))
        _logger.debug("Reset fields %s", "all" if names is None else [format_name_path(n) for n in names])

    @contextmanager
    def batch(self) -> Iterator[FieldStore]:
        """Group several writes into a single change event."""
        with self._transaction(ChangeSource.BATCH):
            yield self

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        callback: ChangeCallback,
        name_list: Iterable[Any] | None = None,
    ) -> Callable[[], None]:
        """Call *callback* after each change touching *name_list* (or any change).

        A change touches a name when the changed path equals it, contains it,
        or lies inside it.  Returns a function that removes the subscription.
        """
        name_paths = None if name_list is None else tuple(list(normalize_path(name)) for name in name_list)
        subscriber = _Subscriber(callback=callback, name_paths=name_paths)
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write(self, name_path: Any, value: Any) -> None:
        write = set_value_copy if self._config.copy_on_write else set_value
        self._store = write(self._store, name_path, value, owner=self)

    @contextmanager
    def _transaction(self, source: ChangeSource) -> Iterator[MutationBatch]:
        with mutation_batch(self._commit, owner=self) as batch:
            if batch is not self._pending_batch:
                self._pending_batch = batch
                self._pending = []
            self._pending.append(source)
            yield batch

    def _commit(self, name_paths: tuple[Any, ...]) -> None:
        sources = set(self._pending)
        self._pending = []
        self._pending_batch = None
        source = sources.pop() if len(sources) == 1 else ChangeSource.BATCH

        event = StoreChangeEvent(source=source, name_paths=name_paths)
        _logger.debug(
            "Store change source=%s paths=%s",
            event.source,
            [format_name_path(list(path)) for path in event.name_paths],
        )
        for subscriber in list(self._subscribers):
            if not subscriber.wants(event):
                continue
            try:
                subscriber.callback(event)
            except Exception:
                _logger.debug("Store subscriber callback failed", exc_info=True)

    def _log_write(self, action: str, name_path: Any, value: Any) -> None:
        if not _logger.isEnabledFor(logging.DEBUG):
            return
        if self._config.log_values:
            _logger.debug(
                "%s %s = %r",
                action,
                format_name_path(name_path) or "<root>",
                redact_path_value(name_path, value),
            )
        else:
            _logger.debug("%s %s", action, format_name_path(name_path) or "<root>")
