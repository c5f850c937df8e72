"""Custom exception hierarchy for pyfieldstore."""

from __future__ import annotations

from typing import Any


class FieldStoreError(Exception):
    """Base exception for all pyfieldstore errors."""


class InvalidStoreShapeError(FieldStoreError):
    """A store or patch has a shape the path helpers cannot route around.

    Raised when a write addresses an immutable container (``tuple``,
    ``MappingProxyType``), a list is addressed by a string key, or a merge
    is given a non-mapping target or patch.  Read helpers never raise it;
    unreachable paths simply resolve to ``None``.
    """

    def __init__(
        self,
        message: str,
        *,
        name_path: Any = None,
        value_type: type | None = None,
    ) -> None:
        self.name_path = name_path
        self.value_type = value_type
        super().__init__(message)
