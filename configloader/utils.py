# configloader/utils.py
"""
configloader.utils
------------------

Shared helpers for file paths, nested mappings and import paths.
"""

import os
import importlib
from typing import Any, Dict, Mapping, Optional


def expand_path(path: Optional[str]) -> Optional[str]:
    """Expand ~ and environment variables in a path string.

    Examples:
        >>> expand_path("~/mocks/app.toml")
        '/home/user/mocks/app.toml'
        >>> expand_path(None)
        None
    """
    if path is None:
        return None
    return os.path.expandvars(os.path.expanduser(str(path)))


def flatten_mapping(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten a nested mapping into { 'a.b.c': value, … }.

    Keys that already contain dots are kept as they are, so
    ``{"Nested": {"Field3": True}}`` and ``{"Nested.Field3": True}`` both
    produce ``{"Nested.Field3": True}``. Empty nested mappings vanish.
    """
    items = {}
    for k, v in data.items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, Mapping):
            items.update(flatten_mapping(v, key))
        else:
            items[key] = v
    return items


def import_object(target: str) -> Any:
    """Import an object from ``"package.module:Name"`` or ``"package.module.Name"``.

    Raises:
        ValueError: If the target names no attribute.
        ImportError: If the module cannot be imported.
        AttributeError: If the module has no such attribute.
    """
    if ':' in target:
        module_name, _, attr_path = target.partition(':')
    else:
        module_name, _, attr_path = target.rpartition('.')
    if not module_name or not attr_path:
        raise ValueError(f"Invalid import path '{target}', expected 'module:Name'")

    obj = importlib.import_module(module_name)
    for part in attr_path.split('.'):
        obj = getattr(obj, part)
    return obj
