"""Named, observable key-value map.

A :class:`Layer` owns its entries and publishes a
:class:`~layerstore.events.LayerChange` after every mutation.  It knows
nothing about stores; a store simply subscribes to it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from typing import Any

from layerstore._emitter import ChangeEmitter
from layerstore.events import ChangeType, LayerChange

_logger = logging.getLogger(__name__)


class Layer:
    """An ordered map that emits a change descriptor for each mutation.

    Parameters
    ----------
    name : str
        Layer name, used by :meth:`Store.layer <layerstore.store.Store.layer>`
        lookups.  Immutable.
    entries : mapping or iterable of pairs, optional
        Initial entries.  No change events are emitted for them.
    """

    def __init__(
        self,
        name: str,
        entries: Mapping[Hashable, Any] | Iterable[tuple[Hashable, Any]] | None = None,
    ) -> None:
        self._name = name
        self._nodes: dict[Hashable, Any] = dict(entries) if entries is not None else {}
        self._emitter: ChangeEmitter[LayerChange] = ChangeEmitter()

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._nodes.get(key, default)

    def has(self, key: Hashable) -> bool:
        return key in self._nodes

    def set(self, key: Hashable, value: Any) -> Layer:
        """Add or replace an entry, then emit ``add`` or ``update``."""
        if key in self._nodes:
            change = LayerChange(
                type=ChangeType.UPDATE,
                key=key,
                old_value=self._nodes[key],
                new_value=value,
            )
        else:
            change = LayerChange(type=ChangeType.ADD, key=key, new_value=value)

        self._nodes[key] = value
        self._emit(change)
        return self

    def delete(self, key: Hashable) -> bool:
        """Remove an entry.

        Returns ``True`` and emits ``delete`` if the key existed, otherwise
        returns ``False`` without emitting anything.
        """
        if key not in self._nodes:
            return False
        old_value = self._nodes.pop(key)
        self._emit(LayerChange(type=ChangeType.DELETE, key=key, old_value=old_value))
        return True

    def clear(self) -> None:
        """Delete every entry one by one, emitting one ``delete`` per key."""
        for key in list(self._nodes):
            self.delete(key)

    def for_each(self, callback: Callable[[Any, Hashable], None]) -> None:
        for key, value in list(self._nodes.items()):
            callback(value, key)

    def keys(self) -> Iterator[Hashable]:
        return iter(list(self._nodes))

    def values(self) -> Iterator[Any]:
        return iter(list(self._nodes.values()))

    def entries(self) -> Iterator[tuple[Hashable, Any]]:
        return iter(list(self._nodes.items()))

    def subscribe(self, listener: Callable[[LayerChange], None]) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        return self._emitter.subscribe(listener)

    def unsubscribe(self, listener: Callable[[LayerChange], None]) -> bool:
        return self._emitter.unsubscribe(listener)

    def to_dict(self) -> dict[str, Any]:
        """Return the layer name and a shallow copy of its raw entries."""
        return {"name": self._name, "nodes": dict(self._nodes)}

    def _emit(self, change: LayerChange) -> None:
        _logger.debug("Layer %r %s key=%r", self._name, change.type.value, change.key)
        self._emitter.emit(change)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[tuple[Hashable, Any]]:
        return self.entries()

    def __repr__(self) -> str:
        return f"Layer(name={self._name!r}, size={len(self._nodes)})"
