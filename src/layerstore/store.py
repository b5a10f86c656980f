"""Layered store: one logical map over an ordered stack of layers.

The store keeps a resolution cache mapping each known key to the layer
that currently supplies its value (the lowest index defining the key).
The cache is built once at construction and afterwards only patched from
layer change events, so reads never scan the layers.

Propagation of a change from layer ``i`` for ``key``:

1. If the key is resolved by a layer with an index lower than ``i`` the
   change is shadowed: nothing happens.
2. A ``delete`` re-resolves the key first (linear scan from index 0, one
   pass over the layers), so the fallback value is visible.
3. Old and new effective values are read: ``add`` takes its old value from
   the not-yet-updated cache, ``delete`` its new value from the
   re-resolved one; otherwise the layer's values are used.
4. ``add``/``update`` make layer ``i`` the owner of the key.
5. A :class:`~layerstore.events.StoreChange` is emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from layerstore._emitter import ChangeEmitter
from layerstore._redact import redact_entry_for_log
from layerstore.config import StoreConfig
from layerstore.events import ChangeType, LayerChange, StoreChange
from layerstore.exceptions import InvalidLayerError, PropagationDepthError
from layerstore.layer import Layer

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Resolution:
    """Cache entry: the layer supplying a key and its precedence index."""

    layer: Layer
    index: int


class Store:
    """Read-only view over layers where earlier layers take precedence.

    Parameters
    ----------
    layers : iterable of Layer
        Layers in precedence order; index 0 wins.  The sequence is fixed for
        the lifetime of the store.
    config : StoreConfig, optional
        Logging and re-entrancy settings.  Defaults to ``StoreConfig()``.
    """

    def __init__(self, layers: Iterable[Layer] = (), *, config: StoreConfig | None = None) -> None:
        self._layers: tuple[Layer, ...] = tuple(layers)
        for position, layer in enumerate(self._layers):
            if not isinstance(layer, Layer):
                raise InvalidLayerError(
                    f"Store layers must be Layer instances, got {type(layer).__name__} at index {position}",
                    position=position,
                )
        self._config = config or StoreConfig()
        self._cache: dict[Hashable, _Resolution] = {}
        self._emitter: ChangeEmitter[StoreChange] = ChangeEmitter()
        self._depth = 0

        self._initialize_layers()
        self._initialize_cache()
        _logger.debug(
            "Store created layers=%s keys=%d",
            [layer.name for layer in self._layers],
            len(self._cache),
        )

    @property
    def layers(self) -> tuple[Layer, ...]:
        return self._layers

    @property
    def config(self) -> StoreConfig:
        return self._config

    def layer(self, name: str) -> Layer | None:
        """Return the first layer called *name*, or ``None``."""
        for layer in self._layers:
            if layer.name == name:
                return layer
        return None

    def owner(self, key: Hashable) -> Layer | None:
        """Return the layer currently supplying *key*, or ``None``."""
        cached = self._cache.get(key)
        return cached.layer if cached is not None else None

    def get(self, key: Hashable, default: Any = None) -> Any:
        cached = self._cache.get(key)
        if cached is None:
            return default
        return cached.layer.get(key, default)

    def has(self, key: Hashable) -> bool:
        cached = self._cache.get(key)
        if cached is None:
            return False
        return cached.layer.has(key)

    def for_each(self, callback: Callable[[Any, Hashable], None]) -> None:
        for key, value in self.entries():
            callback(value, key)

    def keys(self) -> Iterator[Hashable]:
        return iter(list(self._cache))

    def values(self) -> Iterator[Any]:
        for _key, value in self.entries():
            yield value

    def entries(self) -> Iterator[tuple[Hashable, Any]]:
        """Iterate over resolved entries.

        Layers may be mutated while iterating: keys removed in the meantime are
        skipped and values are read at the time they are yielded.
        """
        for key in list(self._cache):
            cached = self._cache.get(key)
            if cached is None:
                continue
            yield key, cached.layer.get(key)

    def subscribe(self, listener: Callable[[StoreChange], None]) -> Callable[[], None]:
        """Register a listener for effective-value changes.

        Returns a callable that unregisters the listener.
        """
        return self._emitter.subscribe(listener)

    def unsubscribe(self, listener: Callable[[StoreChange], None]) -> bool:
        return self._emitter.unsubscribe(listener)

    def to_dict(self) -> dict[str, Any]:
        """Return the resolved view as ``{"nodes": {key: value}}``."""
        return {"nodes": dict(self.entries())}

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._cache)

    def __iter__(self) -> Iterator[tuple[Hashable, Any]]:
        return self.entries()

    def __repr__(self) -> str:
        names = ", ".join(repr(layer.name) for layer in self._layers)
        return f"Store(layers=[{names}], size={len(self._cache)})"

    # ------------------------------------------------------------------
    # Cache maintenance
    # ------------------------------------------------------------------

    def _initialize_layers(self) -> None:
        for index, layer in enumerate(self._layers):
            layer.subscribe(self._make_listener(layer, index))

    def _initialize_cache(self) -> None:
        for index, layer in enumerate(self._layers):
            for key in layer.keys():
                if key in self._cache:
                    continue
                self._cache[key] = _Resolution(layer, index)

    def _make_listener(self, layer: Layer, index: int) -> Callable[[LayerChange], None]:
        def _on_change(change: LayerChange) -> None:
            self._on_layer_change(layer, index, change)

        return _on_change

    def _resolve(self, key: Hashable) -> None:
        """Point the cache entry for *key* at the first layer defining it, or drop it."""
        self._cache.pop(key, None)
        for index, layer in enumerate(self._layers):
            if layer.has(key):
                self._cache[key] = _Resolution(layer, index)
                return

    def _on_layer_change(self, layer: Layer, index: int, change: LayerChange) -> None:
        key = change.key
        cached = self._cache.get(key)

        if cached is not None and index > cached.index:
            _logger.debug(
                "Ignoring shadowed %s of key=%r on layer %r (resolved by %r)",
                change.type.value,
                key,
                layer.name,
                cached.layer.name,
            )
            return

        if change.type == ChangeType.DELETE:
            self._resolve(key)
            fallback = self._cache.get(key)
            if fallback is not None:
                _logger.debug("Key %r now resolved by layer %r", key, fallback.layer.name)

        old_value = self.get(key) if change.type == ChangeType.ADD else change.old_value
        new_value = self.get(key) if change.type == ChangeType.DELETE else change.new_value

        if change.type in (ChangeType.ADD, ChangeType.UPDATE):
            self._cache[key] = _Resolution(layer, index)

        self._log_change(key, old_value, new_value)

        # The cache is already consistent here; only the notification is refused.
        max_depth = self._config.max_propagation_depth
        if max_depth is not None and self._depth >= max_depth:
            raise PropagationDepthError(
                f"Change propagation for key {key!r} exceeded depth {max_depth}",
                key=key,
                depth=self._depth + 1,
            )

        self._depth += 1
        try:
            self._emitter.emit(StoreChange(key=key, old_value=old_value, new_value=new_value))
        finally:
            self._depth -= 1

    def _log_change(self, key: Hashable, old_value: Any, new_value: Any) -> None:
        if not _logger.isEnabledFor(logging.DEBUG):
            return
        if self._config.log_values:
            max_string = self._config.log_max_string
            _logger.debug(
                "Store change key=%r old=%s new=%s",
                key,
                redact_entry_for_log(key, old_value, max_string=max_string),
                redact_entry_for_log(key, new_value, max_string=max_string),
            )
        else:
            _logger.debug("Store change key=%r", key)
