"""Change descriptors.

Layers describe every mutation with a :class:`LayerChange`; the store
re-publishes externally visible changes as :class:`StoreChange`.  An absent
value is ``None``, following the ``dict.get`` convention.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ChangeType(StrEnum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class LayerChange(BaseModel):
    """A single mutation of one layer entry."""

    model_config = ConfigDict(frozen=True)

    type: ChangeType
    key: Any
    old_value: Any = None
    new_value: Any = None

    @model_validator(mode="after")
    def _check_values_match_type(self) -> LayerChange:
        if self.type == ChangeType.ADD and self.old_value is not None:
            raise ValueError("an 'add' change has no old value")
        if self.type == ChangeType.DELETE and self.new_value is not None:
            raise ValueError("a 'delete' change has no new value")
        return self

    @property
    def has_old_value(self) -> bool:
        return self.type in (ChangeType.UPDATE, ChangeType.DELETE)

    @property
    def has_new_value(self) -> bool:
        return self.type in (ChangeType.ADD, ChangeType.UPDATE)

    def to_payload(self) -> dict[str, Any]:
        """Return the dict form, keeping only the values meaningful for the type."""
        payload: dict[str, Any] = {"type": self.type.value, "key": self.key}
        if self.has_old_value:
            payload["oldValue"] = self.old_value
        if self.has_new_value:
            payload["newValue"] = self.new_value
        return payload


class StoreChange(BaseModel):
    """A change of the effective value of a key, as seen through a store."""

    model_config = ConfigDict(frozen=True)

    key: Any
    old_value: Any = None
    new_value: Any = None
