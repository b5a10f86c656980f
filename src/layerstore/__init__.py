"""layerstore - layered key-value store with precedence resolution and change events."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("layerstore")
except PackageNotFoundError:
    __version__ = "0+local"
from layerstore.config import StoreConfig
from layerstore.events import ChangeType, LayerChange, StoreChange
from layerstore.exceptions import (
    InvalidLayerError,
    LayerStoreConfigError,
    LayerStoreError,
    PropagationDepthError,
)
from layerstore.layer import Layer
from layerstore.store import Store

__all__ = [
    "__version__",
    "ChangeType",
    "InvalidLayerError",
    "Layer",
    "LayerChange",
    "LayerStoreConfigError",
    "LayerStoreError",
    "PropagationDepthError",
    "Store",
    "StoreChange",
    "StoreConfig",
]
