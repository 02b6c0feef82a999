"""
Serialization helpers for menuconf items (Menu, Action, Profile).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
Values are keyed by their serialization key, and only set values appear,
as in the XML dialects. This module intentionally keeps serialization
structure stable and explicit.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from menuconf.model import (
    Item,
    Menu,
    ObjectNode,
    Profile,
    item_class_for_type,
)


def values_to_dict(node: ObjectNode) -> Dict[str, Any]:
    result = {}
    for typed in node.set_values():
        value = typed.value
        result[typed.descriptor.serialization_key] = list(value) if isinstance(value, list) else value
    return result


def values_from_dict(node: ObjectNode, d: Dict[str, Any]) -> None:
    for key, value in d.items():
        descriptor = node.descriptor_for_key(key)
        if descriptor is None:
            raise KeyError(f"{type(node).__name__} has no attribute with key '{key}'")
        node.set(descriptor.name, value)


def profile_to_dict(p: Profile) -> Dict[str, Any]:
    return {"id": p.id, "values": values_to_dict(p)}


def profile_from_dict(d: Dict[str, Any]) -> Profile:
    p = Profile(id=d["id"])
    values_from_dict(p, d.get("values", {}))
    return p


def item_to_dict(item: Item) -> Dict[str, Any]:
    d = {
        "type": item.type_name,
        "id": item.id,
        "values": values_to_dict(item),
    }
    if isinstance(item, Menu):
        d["children"] = [item_to_dict(child) for child in item.children]
    else:
        d["profiles"] = [profile_to_dict(p) for p in item.profiles]
    return d


def item_from_dict(d: Dict[str, Any]) -> Item:
    cls = item_class_for_type(d.get("type"))
    if cls is None:
        raise TypeError(f"Unsupported item dict type: {d.get('type')}")
    item = cls(id=d["id"])
    values_from_dict(item, d.get("values", {}))
    if isinstance(item, Menu):
        for child in d.get("children", []):
            item.append_child(item_from_dict(child))
    else:
        for p in d.get("profiles", []):
            item.attach_profile(profile_from_dict(p))
    return item


def item_to_json(item: Item) -> str:
    return json.dumps(item_to_dict(item), sort_keys=True)


def item_from_json(s: str) -> Item:
    d = json.loads(s)
    return item_from_dict(d)


def item_to_yaml(item: Item) -> str:
    return yaml.safe_dump(item_to_dict(item), sort_keys=False, allow_unicode=True)


def item_from_yaml(s: str) -> Item:
    d = yaml.safe_load(s)
    return item_from_dict(d)
