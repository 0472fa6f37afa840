# configloader/structs.py
"""
configloader.structs
--------------------

How configuration structures are declared.

A structure is any dataclass instance. Three things can be attached to its
fields through ``dataclasses.field(metadata=...)``:

- ``embedded(Factory)`` marks a member as *transparent*: its own fields are
  promoted into the parent's namespace and are also reachable with the
  member's class name as a prefix (``Config.Field1`` and ``Field1``).
- an external name under any metadata key (``metadata={"yaml": "field1"}``),
  which the resolver consults only when asked for that key.
- nothing at all, for plain scalars and nested structures.

Example:

    @dataclass
    class Config:
        Field1: str = ""
        Nested: NestedSection = field(default_factory=NestedSection)

    @dataclass
    class ConfigWithEmbeds(Promoted):
        config: Config = embedded(Config)
        Field4: float = 0.0
"""

import logging
import dataclasses
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, get_type_hints

log = logging.getLogger(__name__)

# Metadata key flagging a transparent (embedded) member
EMBEDDED = "configloader.embedded"


def embedded(factory: Callable[[], Any], *, metadata: Optional[Dict[str, Any]] = None, **kwargs):
    """
    Declare an embedded structure member.

    Args:
        factory: Zero-argument callable (usually the dataclass itself) building
                 the member's default value.
        metadata: Extra field metadata, e.g. an external name tag.
        **kwargs: Passed through to ``dataclasses.field``.

    Returns:
        A ``dataclasses.Field`` flagged as embedded.
    """
    merged = dict(metadata or {})
    merged[EMBEDDED] = True
    return dataclasses.field(default_factory=factory, metadata=merged, **kwargs)


def is_structure(value: Any) -> bool:
    """True for dataclass *instances* (not dataclass types)."""
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def is_embedded(f: dataclasses.Field) -> bool:
    return bool(f.metadata.get(EMBEDDED, False))


def field_alias(f: dataclasses.Field, alias_tag: Optional[str]) -> Optional[str]:
    """Return the external name stored under ``alias_tag``, if any."""
    if not alias_tag:
        return None
    alias = f.metadata.get(alias_tag)
    return alias if isinstance(alias, str) and alias else None


@lru_cache(maxsize=None)
def _class_hints(cls: type) -> Dict[str, Any]:
    return get_type_hints(cls)


def _evaluate_hint(cls: type, f: dataclasses.Field, localns: Dict[str, Any]) -> Any:
    """Evaluate one string annotation in the class's module plus ``localns``; Any if that fails."""
    if not isinstance(f.type, str):
        return f.type
    holder = type(f"_{cls.__name__}_{f.name}", (), {
        "__annotations__": {f.name: f.type},
        "__module__": cls.__module__,
    })
    try:
        return get_type_hints(holder, localns=localns)[f.name]
    except (NameError, TypeError, SyntaxError) as e:
        log.debug(f"DEBUG [configloader.type_hints]: Leaving '{cls.__name__}.{f.name}' untyped: {e}")
        return Any


def type_hints(obj: Any) -> Dict[str, Any]:
    """
    Resolved annotations of a structure instance (or dataclass type).

    Postponed annotations naming classes that are not module globals (e.g.
    dataclasses defined inside a function body) are evaluated one field at
    a time, with the class itself and the classes of the instance's current
    field values in scope. A field whose annotation still cannot be
    evaluated is treated as ``Any``.
    """
    cls = obj if isinstance(obj, type) else type(obj)
    try:
        return _class_hints(cls)
    except (NameError, TypeError) as e:
        log.debug(f"DEBUG [configloader.type_hints]: Could not evaluate hints of {cls.__name__}: {e}")

    localns: Dict[str, Any] = {cls.__name__: cls}
    if not isinstance(obj, type):
        for f in dataclasses.fields(cls):
            value_type = type(getattr(obj, f.name))
            localns.setdefault(value_type.__name__, value_type)
    return {f.name: _evaluate_hint(cls, f, localns) for f in dataclasses.fields(cls)}


def split_fields(obj: Any):
    """Split the fields of a structure into (plain, embedded) lists."""
    plain: List[dataclasses.Field] = []
    inner: List[dataclasses.Field] = []
    for f in dataclasses.fields(obj):
        (inner if is_embedded(f) else plain).append(f)
    return plain, inner


class Promoted:
    """
    Mixin giving attribute access to promoted fields of embedded members.

    ``cfg.Field1`` reads (and writes) ``cfg.config.Field1`` when ``config`` is
    declared with ``embedded(...)`` and the outer structure has no ``Field1``
    of its own.
    """

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails
        if name.startswith('_'):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        from .resolver import resolve_field
        from .exceptions import UnknownFieldError
        try:
            return resolve_field(self, name).get()
        except UnknownFieldError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any):
        own = getattr(type(self), "__dataclass_fields__", {})
        if name.startswith('_') or name in own:
            super().__setattr__(name, value)
            return
        from .resolver import resolve_field
        from .exceptions import UnknownFieldError
        try:
            ref = resolve_field(self, name)
        except UnknownFieldError:
            super().__setattr__(name, value)
            return
        ref.set(value)
