"""pyfieldstore - Path-addressed access to nested form state."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfieldstore")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfieldstore._array import check_array, to_array
from pyfieldstore.batch import MutationBatch, current_batch, mutation_batch, record_mutation
from pyfieldstore.config import StoreConfig
from pyfieldstore.events import ChangeSource, StoreChangeEvent
from pyfieldstore.exceptions import FieldStoreError, InvalidStoreShapeError
from pyfieldstore.kinds import ValueKind, is_plain_object, strict_equal, value_kind
from pyfieldstore.paths import (
    NamePath,
    NamePathSegment,
    contains_name_path,
    format_name_path,
    get_name_path,
    is_parent_name_path,
    iter_name_paths,
    match_name_path,
    normalize_path,
    parse_name_path,
)
from pyfieldstore.store import FieldStore
from pyfieldstore.values import (
    clone_by_name_path_list,
    default_get_value_from_event,
    get_value,
    is_similar,
    move,
    set_value,
    set_value_copy,
    set_values,
    set_values_copy,
)

__all__ = [
    "__version__",
    "ChangeSource",
    "FieldStore",
    "FieldStoreError",
    "InvalidStoreShapeError",
    "MutationBatch",
    "NamePath",
    "NamePathSegment",
    "StoreChangeEvent",
    "StoreConfig",
    "ValueKind",
    "check_array",
    "clone_by_name_path_list",
    "contains_name_path",
    "current_batch",
    "default_get_value_from_event",
    "format_name_path",
    "get_name_path",
    "get_value",
    "is_parent_name_path",
    "is_plain_object",
    "is_similar",
    "iter_name_paths",
    "match_name_path",
    "move",
    "mutation_batch",
    "normalize_path",
    "parse_name_path",
    "record_mutation",
    "set_value",
    "set_value_copy",
    "set_values",
    "set_values_copy",
    "strict_equal",
    "to_array",
    "value_kind",
]
