"""Custom exception hierarchy for layerstore.

Reading or deleting a missing key is never an error: queries return
``None``/``False`` instead.  These exceptions cover misuse at the edges
(configuration, construction, runaway listener recursion).
"""

from __future__ import annotations

from typing import Any


class LayerStoreError(Exception):
    """Base exception for all layerstore errors."""


class LayerStoreConfigError(LayerStoreError):
    """Invalid configuration value."""


class InvalidLayerError(LayerStoreError, TypeError):
    """An object that is not a :class:`~layerstore.layer.Layer` was given to a store."""

    def __init__(self, message: str, *, position: int) -> None:
        self.position = position
        super().__init__(message)


class PropagationDepthError(LayerStoreError):
    """Change propagation re-entered the store too many times.

    Only raised when ``StoreConfig.max_propagation_depth`` is set.  This
    usually means a change listener mutates a layer which, through the
    store, triggers the same listener again.
    """

    def __init__(self, message: str, *, key: Any, depth: int) -> None:
        self.key = key
        self.depth = depth
        super().__init__(message)
