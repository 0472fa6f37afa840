# configloader/loader.py
"""
configloader.loader
-------------------

Mock configuration loader for tests.

``MockLoader`` stands in for a real file- or environment-based loader. It
holds a base layer of dotted-path → value pairs (the mock data), an override
layer filled through ``override()``, and writes both into a dataclass
instance on ``load()``. Supports loading mock data from JSON, TOML and .env
files.
Requires Python 3.10+.
"""

import os
import abc
import copy
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import tomli
from dotenv import dotenv_values

from .exceptions import MockFileError
from .provenance import MOCK, OVERRIDE, ProvenanceEntry, ProvenanceStore
from .resolver import resolve_field
from .structs import is_structure
from .utils import expand_path, flatten_mapping
from .values import coerce_value, parse_value

log = logging.getLogger(__name__) # Logger for configloader loader

_LAYER_RANK = {MOCK: 0, OVERRIDE: 1}

# --- Helper Functions ---

def _is_dotenv(file_path: str) -> bool:
    name = os.path.basename(file_path)
    return name == '.env' or name.startswith('.env.') or name.endswith('.env')


def load_mock_file(file_path: str) -> Dict[str, Any]:
    """
    Load mock data from a JSON, TOML or .env file into a flat dotted-path mapping.

    Nested objects (JSON) and tables (TOML) are flattened, so
    ``[Nested]\\nField3 = true`` becomes ``{"Nested.Field3": True}``.
    Values read from .env files are strings and are parsed into scalars
    (``"2"`` -> ``2``, ``"true"`` -> ``True``).

    Args:
        file_path: Path to the file. ``~`` and ``$VARS`` are expanded.

    Returns:
        A flat dict mapping dotted paths to values.

    Raises:
        FileNotFoundError: If the file does not exist.
        MockFileError: If the file cannot be parsed or its type is unsupported.
    """
    path = expand_path(file_path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Mock data file not found: {file_path}")

    ext = os.path.splitext(path)[1].lower()
    try:
        if ext == '.toml':
            with open(path, mode='rb') as f: content = tomli.load(f)
        elif ext == '.json':
            with open(path, mode='r', encoding='utf-8') as f: content = json.load(f)
        elif _is_dotenv(path):
            # dotenv_values yields None for keys declared without '='
            content = {k: parse_value(v) for k, v in dotenv_values(path).items() if v is not None}
        else:
            raise ValueError(f"Unsupported mock data file type: {ext or os.path.basename(path)}")
    except Exception as e:
        raise MockFileError(file_path, e) from e

    if not isinstance(content, dict):
        raise MockFileError(file_path, f"top-level value must be an object, got {type(content).__name__}")

    flat = flatten_mapping(content)
    log.debug(f"DEBUG [configloader.load_mock_file]: Loaded {len(flat)} mock entries from {path}")
    return flat


# --- Loader Classes ---

class Loader(abc.ABC):
    """
    Interface shared by configuration loaders.

    A loader writes configuration values into a caller-owned structure
    instance. Code that accepts a ``Loader`` can be handed a ``MockLoader``
    in tests.
    """

    @abc.abstractmethod
    def load(self, target: Any) -> Any:
        """Populate ``target`` in place and return it."""


class MockLoader(Loader):
    """
    Loader populating a structure from in-memory dotted-path mappings.

    Precedence (lowest to highest):
    1.  **Mock data (`mock_data`)**: snapshot taken at construction.
    2.  **Overrides (`override()`)**: registered afterwards, one path at a time.

    Precedence is decided per *resolved field*, not per path string: an
    override registered as ``"Config.Field1"`` beats mock data registered as
    ``"Field1"`` when both reach the same embedded field.

    Example:
        loader = MockLoader({"Field1": "value1", "Nested.Field3": True})
        loader.override("Field1", "newvalue1")
        cfg = loader.load(Config())
    """

    def __init__(self,
                 mock_data: Optional[Mapping[str, Any]] = None,
                 *,
                 alias_tag: Optional[str] = None, # Field metadata key holding external names
                 parse_strings: bool = False): # Parse "true"/"2"/"3.14" for non-string fields
        self._mock_data: Dict[str, Any] = dict(mock_data or {})
        self._overrides: Dict[str, Any] = {}
        self.alias_tag = alias_tag
        self.parse_strings = parse_strings
        self._provenance = ProvenanceStore()
        log.debug(f"DEBUG [configloader.MockLoader]: Created with {len(self._mock_data)} mock entries")

    @classmethod
    def from_file(cls, file_path: str, **kwargs) -> "MockLoader":
        """Build a loader whose mock data comes from a JSON, TOML or .env file."""
        return cls(load_mock_file(file_path), **kwargs)

    @property
    def mock_data(self) -> Mapping[str, Any]:
        return MappingProxyType(self._mock_data)

    @property
    def overrides(self) -> Mapping[str, Any]:
        return MappingProxyType(self._overrides)

    @property
    def provenance(self) -> ProvenanceStore:
        """Provenance of the fields written by the most recent ``load()``."""
        return self._provenance

    def override(self, path: str, value: Any) -> "MockLoader":
        """
        Register an override for a dotted path.

        A later override for the same path replaces the earlier one. The path
        is not checked here; unknown paths fail at ``load()``.
        """
        self._overrides[path] = value
        return self

    def _plan(self, target: Any):
        """
        Resolve and coerce every registered path without writing anything.

        Returns:
            A tuple ``(writes, store)``: ``writes`` lists ``(FieldRef, value)``
            pairs in write order, ``store`` is the provenance of the planned
            writes.
        """
        planned = {}
        store = ProvenanceStore()

        for layer, data in ((MOCK, self._mock_data), (OVERRIDE, self._overrides)):
            seen_in_layer = {}
            for path, raw_value in data.items():
                ref = resolve_field(target, path, self.alias_tag)
                value = coerce_value(raw_value, ref.annotation, path, self.parse_strings)

                if ref.identity in seen_in_layer:
                    log.warning(f"Warning: '{path}' and '{seen_in_layer[ref.identity]}' both set "
                                f"field '{ref.canonical_path}' in the {layer} layer; '{path}' wins.")
                elif ref.identity in planned:
                    log.debug(f"DEBUG [configloader._plan]: {layer} '{path}' replaces "
                              f"'{planned[ref.identity][0].path}' for field '{ref.canonical_path}'")
                seen_in_layer[ref.identity] = path

                planned[ref.identity] = (ref, value, _LAYER_RANK[layer])
                store.record(ref.canonical_path, value, layer, path)

        # Mock layer before override layer; within a layer, a structure
        # before the fields beneath it
        ordered = sorted(planned.values(), key=lambda w: (w[2], w[0].depth))
        writes = [(ref, value) for ref, value, _ in ordered]
        return writes, store

    def load(self, target: Any) -> Any:
        """
        Write mock data, then overrides, into ``target``.

        All paths are resolved and all values coerced before the first write,
        so a failing load leaves ``target`` untouched. Structure values are
        deep-copied, so targets never share them with each other or with the
        loader.

        Args:
            target: The dataclass instance to populate (modified in place).

        Returns:
            ``target``, for convenience.

        Raises:
            UnknownFieldError: If any registered path does not resolve.
            TypeMismatchError: If a value cannot be assigned to its field.
        """
        writes, store = self._plan(target)

        for ref, value in writes:
            if is_structure(value):
                value = copy.deepcopy(value)
            # An earlier write may have replaced a structure on the way down
            ref.rebind(target).set(value)

        self._provenance = store
        log.debug(f"DEBUG [configloader.load]: Wrote {len(writes)} fields into {type(target).__name__} "
                  f"(layers: {store.layers_summary()})")
        return target

    def explain(self, target: Any, path: str) -> Optional[ProvenanceEntry]:
        """
        Return the provenance entry for the field ``path`` resolves to in ``target``.

        Any alias spelling of the field works. Returns None if the last load
        did not write that field.
        """
        ref = resolve_field(target, path, self.alias_tag)
        return self._provenance.get(ref.canonical_path)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(mock_data={self._mock_data!r}, "
                f"overrides={self._overrides!r})")


def new_mock_loader(mock_data: Optional[Mapping[str, Any]] = None, **kwargs) -> MockLoader:
    """Create a ``MockLoader`` for ``mock_data``."""
    return MockLoader(mock_data, **kwargs)
