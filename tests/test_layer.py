from __future__ import annotations

from typing import Any

from layerstore.events import ChangeType, LayerChange
from layerstore.layer import Layer


def _recording_layer(entries: dict[str, Any] | None = None) -> tuple[Layer, list[LayerChange]]:
    layer = Layer("lorem", entries if entries is not None else {"lorem": "from lorem"})
    changes: list[LayerChange] = []
    layer.subscribe(changes.append)
    return layer, changes


def test_empty_layer() -> None:
    layer = Layer("lorem")
    assert layer.name == "lorem"
    assert len(layer) == 0
    assert layer.to_dict() == {"name": "lorem", "nodes": {}}


def test_initial_entries_from_pairs() -> None:
    layer = Layer("pairs", [("a", 1), ("b", 2)])
    assert list(layer.keys()) == ["a", "b"]
    assert layer.get("b") == 2


def test_get_and_has() -> None:
    layer, changes = _recording_layer()
    assert layer.get("lorem") == "from lorem"
    assert layer.has("lorem") is True
    assert "lorem" in layer
    assert layer.get("missing") is None
    assert layer.get("missing", "fallback") == "fallback"
    assert layer.has("missing") is False
    assert changes == []


def test_set_new_key_emits_add() -> None:
    layer, changes = _recording_layer()
    assert layer.set("ipsum", "value") is layer

    assert layer.get("ipsum") == "value"
    assert len(changes) == 1
    assert changes[0].type == ChangeType.ADD
    assert changes[0].to_payload() == {"type": "add", "key": "ipsum", "newValue": "value"}


def test_set_existing_key_emits_update() -> None:
    layer, changes = _recording_layer()
    layer.set("lorem", "changed")

    assert changes[0].to_payload() == {
        "type": "update",
        "key": "lorem",
        "oldValue": "from lorem",
        "newValue": "changed",
    }


def test_change_is_emitted_after_the_write() -> None:
    layer = Layer("lorem")
    seen: list[Any] = []
    layer.subscribe(lambda change: seen.append(layer.get(change.key)))

    layer.set("a", 1)
    layer.delete("a")

    assert seen == [1, None]


def test_delete_existing_key() -> None:
    layer, changes = _recording_layer()
    assert layer.delete("lorem") is True
    assert layer.has("lorem") is False
    assert changes[0].to_payload() == {"type": "delete", "key": "lorem", "oldValue": "from lorem"}


def test_delete_missing_key_is_silent() -> None:
    layer, changes = _recording_layer()
    assert layer.delete("ipsum") is False
    assert changes == []


def test_clear_deletes_each_key_in_order() -> None:
    layer, changes = _recording_layer({"a": 1, "b": 2, "c": 3})
    layer.clear()

    assert len(layer) == 0
    assert [(c.type, c.key, c.old_value) for c in changes] == [
        (ChangeType.DELETE, "a", 1),
        (ChangeType.DELETE, "b", 2),
        (ChangeType.DELETE, "c", 3),
    ]


def test_none_is_a_storable_value() -> None:
    layer, changes = _recording_layer({})
    layer.set("k", None)

    assert layer.has("k") is True
    assert changes[0].type == ChangeType.ADD
    layer.set("k", 1)
    assert changes[1].type == ChangeType.UPDATE
    assert changes[1].old_value is None


def test_iteration_helpers() -> None:
    layer = Layer("lorem", {"a": 1, "b": 2})
    calls: list[tuple[Any, Any]] = []
    layer.for_each(lambda value, key: calls.append((value, key)))

    assert calls == [(1, "a"), (2, "b")]
    assert list(layer.keys()) == ["a", "b"]
    assert list(layer.values()) == [1, 2]
    assert list(layer.entries()) == [("a", 1), ("b", 2)]
    assert list(layer) == [("a", 1), ("b", 2)]


def test_to_dict_is_a_copy() -> None:
    layer = Layer("lorem", {"a": 1})
    snapshot = layer.to_dict()
    snapshot["nodes"]["b"] = 2

    assert snapshot["name"] == "lorem"
    assert layer.has("b") is False


def test_unsubscribe_stops_delivery() -> None:
    layer, changes = _recording_layer()
    extra: list[LayerChange] = []
    unsubscribe = layer.subscribe(extra.append)

    layer.set("a", 1)
    unsubscribe()
    layer.set("b", 2)

    assert [c.key for c in changes] == ["a", "b"]
    assert [c.key for c in extra] == ["a"]
    assert layer.unsubscribe(extra.append) is False


def test_repr_mentions_name() -> None:
    assert "lorem" in repr(Layer("lorem", {"a": 1}))


def test_deleting_while_iterating_keys() -> None:
    layer, changes = _recording_layer({"a": 1, "b": 2, "c": 3})

    for key in layer.keys():
        layer.delete(key)

    assert len(layer) == 0
    assert [c.key for c in changes] == ["a", "b", "c"]


def test_setting_while_iterating_entries() -> None:
    layer = Layer("lorem", {"a": 1, "b": 2})

    for key, value in layer:
        layer.set(f"{key}2", value * 2)

    assert layer.to_dict()["nodes"] == {"a": 1, "b": 2, "a2": 2, "b2": 4}
