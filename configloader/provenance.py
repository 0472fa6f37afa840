# configloader/provenance.py
"""
configloader.provenance
-----------------------

Records where each value written by ``MockLoader.load()`` came from.

Entries are keyed by the *canonical* path of the field (the attribute names
from the root, e.g. ``config.Field1``), so every alias spelling of the same
field lands on one key. The history of a key shows values that were
registered for the field but lost to a later or higher-precedence entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MOCK = "mock"
OVERRIDE = "override"


@dataclass(frozen=True)
class ProvenanceEntry:
    """Records the origin of a single field value.

    Attributes:
        value: The value that was registered (after coercion).
        layer: ``"mock"`` or ``"override"``.
        path: The dotted path spelling it was registered under
            (e.g. ``"Field1"`` or ``"Config.Field1"``).
        key: Canonical path of the field it resolved to.
    """

    value: Any
    layer: str
    path: str
    key: str

    def __repr__(self) -> str:
        return f"{self.key} = {self.value!r}  ← {self.layer}:{self.path}"


@dataclass
class ProvenanceStore:
    """Stores provenance information for every field written by a load.

    Attributes:
        _entries: Winning provenance for each canonical field path.
        _history: Earlier entries for the same field that were superseded.
    """

    _entries: dict[str, ProvenanceEntry] = field(default_factory=dict)
    _history: dict[str, list[ProvenanceEntry]] = field(default_factory=dict)

    def record(self, key: str, value: Any, layer: str, path: str) -> ProvenanceEntry:
        """Record that a field was given a value by a layer.

        If the field already has an entry, the previous entry is moved
        to history.
        """
        entry = ProvenanceEntry(value=value, layer=layer, path=path, key=key)

        if key in self._entries:
            self._history.setdefault(key, []).append(self._entries[key])

        self._entries[key] = entry
        return entry

    def get(self, key: str) -> ProvenanceEntry | None:
        return self._entries.get(key)

    def get_history(self, key: str) -> list[ProvenanceEntry]:
        """Get every entry registered for a field, oldest first, winner last."""
        history = list(self._history.get(key, []))
        current = self._entries.get(key)
        if current:
            history.append(current)
        return history

    def all_entries(self) -> dict[str, ProvenanceEntry]:
        return dict(self._entries)

    def layers_summary(self) -> dict[str, int]:
        """Count how many fields each layer supplied the winning value for."""
        counts: dict[str, int] = {}
        for entry in self._entries.values():
            counts[entry.layer] = counts.get(entry.layer, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._entries)
