# configloader/resolver.py
"""
configloader.resolver
---------------------

Resolution of dotted paths against configuration structures.

``resolve_field(target, "Nested.Field3")`` walks the dataclass fields of
``target`` one segment at a time and returns a ``FieldRef`` to the leaf.
At every level a segment is matched in this order:

1. a plain (non-embedded) field with that name, then one with that alias.
   A match commits the walk; it is never second-guessed by an embedded
   member.
2. an embedded member whose class name, attribute name or alias equals
   the segment. The remaining segments are matched inside it.
3. the *unconsumed* path is tried inside every embedded member, which is
   how promoted names like ``Field1`` reach ``config.Field1``. The
   shallowest candidate wins; two candidates at the same depth are
   ambiguous and do not resolve; deeper ties are ignored.
"""

import logging
import dataclasses
from typing import Any, Iterator, List, Optional

from .exceptions import UnknownFieldError
from .structs import field_alias, is_embedded, is_structure, split_fields, type_hints

log = logging.getLogger(__name__)


class FieldRef:
    """
    Writable handle to a single field of a structure instance.

    Attributes:
        owner: The structure instance holding the field.
        name: Attribute name of the field on ``owner``.
        annotation: Declared type of the field (resolved type hint).
        path: The dotted path this handle was resolved from.
        trail: Attribute names from the root down to this field; its dotted
               form is the canonical path of the storage slot.
    """

    __slots__ = ("owner", "name", "annotation", "path", "trail")

    def __init__(self, owner: Any, name: str, annotation: Any, path: str, trail=()):
        self.owner = owner
        self.name = name
        self.annotation = annotation
        self.path = path
        self.trail = tuple(trail) or (name,)

    @property
    def identity(self):
        """Key identifying the physical storage slot, shared by every alias path."""
        return (id(self.owner), self.name)

    @property
    def depth(self) -> int:
        """Number of structure levels descended from the root."""
        return len(self.trail) - 1

    @property
    def canonical_path(self) -> str:
        return '.'.join(self.trail)

    @property
    def qualified_name(self) -> str:
        return f"{type(self.owner).__name__}.{self.name}"

    def get(self) -> Any:
        return getattr(self.owner, self.name)

    def set(self, value: Any):
        # object.__setattr__ bypasses Promoted.__setattr__ on the owner
        object.__setattr__(self.owner, self.name, value)

    def rebind(self, root: Any) -> "FieldRef":
        """
        Return a handle to the same slot, following ``trail`` from ``root`` again.

        Needed once a structure on the way down has been replaced.
        """
        owner = root
        for attr in self.trail[:-1]:
            owner = getattr(owner, attr)
        if owner is self.owner:
            return self
        return FieldRef(owner, self.name, self.annotation, self.path, self.trail)

    def __repr__(self) -> str:
        return f"FieldRef({self.path!r} -> {self.qualified_name})"


def split_path(path: str) -> List[str]:
    """
    Split a dotted path into its segments.

    Raises:
        UnknownFieldError: If the path is empty or has an empty segment.
    """
    if not isinstance(path, str) or not path:
        raise UnknownFieldError(path, "empty path")
    segments = path.split('.')
    if not all(segments):
        raise UnknownFieldError(path, "empty path segment")
    return segments


class _Ambiguous:
    """Marks a promoted name provided by several fields at the same depth."""

    __slots__ = ("depth",)

    def __init__(self, depth: int):
        self.depth = depth


def _find_plain(plain, name: str, alias_tag: Optional[str]):
    # Declared names take priority over alias tags
    for f in plain:
        if f.name == name:
            return f
    for f in plain:
        if field_alias(f, alias_tag) == name:
            return f
    return None


def _walk(obj: Any, segments: List[str], path: str, alias_tag: Optional[str], trail: tuple):
    """
    Resolve ``segments`` inside ``obj``.

    Returns a ``FieldRef``, an ``_Ambiguous`` marker, or None.
    """
    name, rest = segments[0], segments[1:]
    plain, inner = split_fields(obj)
    hints = type_hints(obj)

    # 1) Exact, non-embedded match
    f = _find_plain(plain, name, alias_tag)
    if f is not None:
        if not rest:
            return FieldRef(obj, f.name, hints.get(f.name, f.type), path, trail + (f.name,))
        value = getattr(obj, f.name)
        if not is_structure(value):
            log.debug(f"DEBUG [configloader._walk]: '{name}' in '{path}' is not a structure, cannot descend")
            return None
        return _walk(value, rest, path, alias_tag, trail + (f.name,))

    # 2) Embedded member addressed by its type name (indirect form)
    for f in inner:
        value = getattr(obj, f.name)
        if name not in (type(value).__name__, f.name, field_alias(f, alias_tag)):
            continue
        if not rest:
            return FieldRef(obj, f.name, hints.get(f.name, f.type), path, trail + (f.name,))
        if is_structure(value):
            found = _walk(value, rest, path, alias_tag, trail + (f.name,))
            if found is not None:
                return found

    # 3) Promoted form: same segments, one level down in every embedded member
    candidates = []
    for f in inner:
        value = getattr(obj, f.name)
        if not is_structure(value):
            continue
        found = _walk(value, segments, path, alias_tag, trail + (f.name,))
        if found is not None:
            candidates.append(found)
    if not candidates:
        return None

    # Ambiguity below the shallowest candidate does not matter
    shallowest = min(c.depth for c in candidates)
    winners = [c for c in candidates if c.depth == shallowest]
    if any(isinstance(c, _Ambiguous) for c in winners) or len({c.identity for c in winners}) > 1:
        return _Ambiguous(shallowest)
    return winners[0]


def resolve_field(target: Any, path: str, alias_tag: Optional[str] = None) -> FieldRef:
    """
    Resolve a dotted path to a writable field of ``target``.

    Args:
        target: A dataclass instance (the root structure).
        path: Dotted path, e.g. ``"Nested.Field3"`` or ``"Config.Field1"``.
        alias_tag: Optional field metadata key holding an external name
                   (e.g. ``"yaml"``) that is accepted as a segment name.

    Returns:
        A ``FieldRef`` for the leaf field.

    Raises:
        UnknownFieldError: If the path does not resolve to exactly one field.
        TypeError: If ``target`` is not a dataclass instance.
    """
    if not is_structure(target):
        raise TypeError(f"Cannot resolve '{path}': target must be a dataclass instance, got {type(target).__name__}")
    segments = split_path(path)
    ref = _walk(target, segments, path, alias_tag, ())
    if ref is None:
        raise UnknownFieldError(path)
    if isinstance(ref, _Ambiguous):
        raise UnknownFieldError(path, "ambiguous")
    log.debug(f"DEBUG [configloader.resolve_field]: Resolved '{path}' -> {ref.qualified_name} (depth {ref.depth})")
    return ref


def iter_paths(target: Any, promoted: bool = True, prefix: str = "") -> Iterator[str]:
    """
    Yield the dotted path of every scalar leaf reachable from ``target``.

    Embedded members contribute their fields under the promoted name when
    ``promoted`` is True, and under their class name prefix otherwise.
    """
    for f in dataclasses.fields(target):
        value = getattr(target, f.name)
        if is_embedded(f):
            sub_prefix = prefix if promoted else f"{prefix}{type(value).__name__}."
        else:
            sub_prefix = f"{prefix}{f.name}."
        if is_structure(value):
            yield from iter_paths(value, promoted, sub_prefix)
        else:
            yield f"{prefix}{f.name}"
