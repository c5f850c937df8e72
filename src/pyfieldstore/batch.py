"""Mutation batches.

A write helper such as :func:`pyfieldstore.values.set_value` may touch
several containers while walking a path.  Observers must see that as one
logical change, so writes are recorded into the *active* batch and
observers are notified once, when the outermost batch closes::

    with mutation_batch(on_commit=print):
        set_value(store, ["user", "name"], "Ada")
        set_values(store, {"user": {"age": 36}})
    # -> (['user', 'name'], ['user', 'age'])

Nested ``mutation_batch`` scopes join the outer batch.  The active batch is
held in a :class:`contextvars.ContextVar` so threads and asyncio tasks never
share one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_logger = logging.getLogger(__name__)

CommitCallback = Callable[[tuple[Any, ...]], None]

_ACTIVE: ContextVar[MutationBatch | None] = ContextVar("pyfieldstore_active_batch", default=None)


def _path_key(name_path: Sequence[Any]) -> tuple[Any, ...]:
    # Tag bools so True and 1 stay distinct segments.
    return tuple((isinstance(segment, bool), segment) for segment in name_path)


class MutationBatch:
    """Collects changed name paths until the outermost scope exits.

    Paths are grouped by *owner* so several stores can share one batch
    without seeing each other's changes.  Owner ``None`` receives the raw
    writes made by the module-level helpers.
    """

    def __init__(self) -> None:
        self.depth = 0
        self._changes: dict[Hashable | None, list[list[Any]]] = {}
        self._seen: dict[Hashable | None, set[tuple[Any, ...]]] = {}
        self._callbacks: list[tuple[Hashable | None, CommitCallback]] = []
        self._committed = False

    def add_callback(self, callback: CommitCallback, *, owner: Hashable | None = None) -> None:
        """Register *callback*; re-registering an equal callback is a no-op."""
        if (owner, callback) not in self._callbacks:
            self._callbacks.append((owner, callback))

    def record(self, name_path: Sequence[Any], *, owner: Hashable | None = None) -> None:
        """Record a changed path; duplicates are dropped, order is kept."""
        key = _path_key(name_path)
        seen = self._seen.setdefault(owner, set())
        if key not in seen:
            seen.add(key)
            self._changes.setdefault(owner, []).append(list(name_path))

    def changed(self, owner: Hashable | None = None) -> tuple[list[Any], ...]:
        return tuple(self._changes.get(owner, ()))

    @property
    def committed(self) -> bool:
        return self._committed

    def commit(self) -> None:
        """Notify every callback once with the paths recorded for its owner."""
        if self._committed:
            return
        self._committed = True
        for owner, callback in self._callbacks:
            paths = self.changed(owner)
            if not paths:
                continue
            try:
                callback(paths)
            except Exception:
                _logger.debug("Batch commit callback failed", exc_info=True)


def current_batch() -> MutationBatch | None:
    """Return the batch active in this context, if any."""
    return _ACTIVE.get()


def record_mutation(name_path: Sequence[Any], *, owner: Hashable | None = None) -> None:
    """Record *name_path* on the active batch; no-op outside a batch."""
    batch = _ACTIVE.get()
    if batch is not None:
        batch.record(name_path, owner=owner)


@contextmanager
def mutation_batch(
    on_commit: CommitCallback | None = None,
    *,
    owner: Hashable | None = None,
) -> Iterator[MutationBatch]:
    """Open (or join) a mutation batch.

    *on_commit* is called once with the tuple of changed paths recorded for
    *owner* when the outermost scope exits, whether it exits normally or
    with an exception: in-place writes made before the failure are real and
    observers must still learn about them.
    """
    batch = _ACTIVE.get()
    if batch is not None:
        if on_commit is not None:
            batch.add_callback(on_commit, owner=owner)
        batch.depth += 1
        try:
            yield batch
        finally:
            batch.depth -= 1
        return

    batch = MutationBatch()
    if on_commit is not None:
        batch.add_callback(on_commit, owner=owner)
    batch.depth = 1
    token = _ACTIVE.set(batch)
    try:
        yield batch
    finally:
        batch.depth = 0
        _ACTIVE.reset(token)
        _logger.debug("Committing mutation batch with %d owner(s)", len(batch._changes))
        batch.commit()
