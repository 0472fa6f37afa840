# configloader/__init__.py
"""
configloader – Mock configuration loader for tests.

Populate a dataclass configuration from a mapping of dotted field paths
(``"Nested.Field3"``, ``"Config.Field1"``) instead of a real file or
environment loader.

Import `MockLoader` from `configloader.loader`, `embedded` and `Promoted`
from `configloader.structs`, and the errors from `configloader.exceptions`.
"""

__version__ = "0.1.0"

from .exceptions import ConfigLoadError, MockFileError, TypeMismatchError, UnknownFieldError
from .loader import Loader, MockLoader, load_mock_file, new_mock_loader
from .resolver import FieldRef, resolve_field
from .structs import Promoted, embedded
from .values import ValueKind, coerce_value

__all__ = [
    "ConfigLoadError",
    "MockFileError",
    "TypeMismatchError",
    "UnknownFieldError",
    "Loader",
    "MockLoader",
    "load_mock_file",
    "new_mock_loader",
    "FieldRef",
    "resolve_field",
    "Promoted",
    "embedded",
    "ValueKind",
    "coerce_value",
]
