"""Store configuration for layerstore."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from layerstore.exceptions import LayerStoreConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise LayerStoreConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Store configuration.

    Parameters
    ----------
    max_propagation_depth : int or None
        Maximum number of nested change propagations a store accepts before
        raising :class:`~layerstore.exceptions.PropagationDepthError`.
        Nesting happens when a store listener mutates a layer of the same
        store.  ``None`` (the default) disables the check.
    log_values : bool
        Include entry values in DEBUG logs.  Values are passed through
        :func:`~layerstore._redact.redact_for_log` first.  When disabled only
        keys and change kinds are logged.
    log_max_string : int
        Strings longer than this are truncated in DEBUG logs.
    """

    max_propagation_depth: int | None = None
    log_values: bool = False
    log_max_string: int = 128

    def __post_init__(self) -> None:
        if self.max_propagation_depth is not None and self.max_propagation_depth < 1:
            raise LayerStoreConfigError(
                f"max_propagation_depth must be positive, got {self.max_propagation_depth}"
            )
        if self.log_max_string < 1:
            raise LayerStoreConfigError(f"log_max_string must be positive, got {self.log_max_string}")

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from environment variables.

        Reads ``LAYERSTORE_MAX_PROPAGATION_DEPTH``, ``LAYERSTORE_LOG_VALUES``
        and ``LAYERSTORE_LOG_MAX_STRING``.  Explicit keyword arguments
        override environment values.

        Malformed integers raise
        :class:`~layerstore.exceptions.LayerStoreConfigError`.  An
        unrecognised boolean (anything other than ``1/true/yes/y/on`` or
        ``0/false/no/n/off``) falls back to the default instead.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        depth_env = env.get("LAYERSTORE_MAX_PROPAGATION_DEPTH")
        if depth_env is not None and "max_propagation_depth" not in overrides:
            # An empty value means "unlimited".
            config_kwargs["max_propagation_depth"] = (
                _env_int("LAYERSTORE_MAX_PROPAGATION_DEPTH", depth_env) if depth_env.strip() else None
            )

        if "log_values" not in overrides:
            config_kwargs["log_values"] = _env_bool(env.get("LAYERSTORE_LOG_VALUES"), False)

        max_string_env = env.get("LAYERSTORE_LOG_MAX_STRING")
        if max_string_env is not None and "log_max_string" not in overrides:
            config_kwargs["log_max_string"] = _env_int("LAYERSTORE_LOG_MAX_STRING", max_string_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
