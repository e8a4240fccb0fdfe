"""Serialization of IR trees and API descriptions to JSON-compatible dicts.

Dataclass nodes become dicts tagged with `_type`; tuples become lists.
`deserialize` reverses the mapping, filling omitted keys from field defaults,
so hand-written JSON only needs the fields that matter:

    {"_type": "Field", "name": "id", "typ": {"_type": "TypeReference", "name": "int"}}
"""

from __future__ import annotations

import dataclasses

from . import ir
from .skeleton import ApiDescription, ApiParameter

_NODE_TYPES: dict[str, type] = {}


def _register(cls: type) -> None:
    _NODE_TYPES[cls.__name__] = cls


for _name in dir(ir):
    _obj = getattr(ir, _name)
    if isinstance(_obj, type) and dataclasses.is_dataclass(_obj) and _obj.__module__ == ir.__name__:
        _register(_obj)
_register(ApiParameter)
_register(ApiDescription)

# Abstract bases are never valid as concrete nodes.
for _base in ("Expr", "Stmt", "Member"):
    del _NODE_TYPES[_base]


def serialize(obj: object) -> object:
    """Recursively serialize an object to a JSON-compatible structure."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        name = type(obj).__name__
        if name not in _NODE_TYPES:
            raise ValueError(f"cannot serialize {name}")
        result: dict[str, object] = {"_type": name}
        for f in dataclasses.fields(obj):
            result[f.name] = serialize(getattr(obj, f.name))
        return result
    raise ValueError(f"cannot serialize {type(obj).__name__}")


def deserialize(data: object) -> object:
    """Rebuild nodes from `serialize` output (or hand-written equivalents)."""
    if isinstance(data, list):
        return tuple(deserialize(x) for x in data)
    if isinstance(data, dict):
        if "_type" not in data:
            raise ValueError("object without _type: " + ", ".join(sorted(data)))
        name = data["_type"]
        cls = _NODE_TYPES.get(name)
        if cls is None:
            raise ValueError(f"unknown node type: {name}")
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, object] = {}
        for key, value in data.items():
            if key == "_type":
                continue
            if key not in known:
                raise ValueError(f"unknown field {key} for {name}")
            kwargs[key] = deserialize(value)
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ValueError(f"bad {name}: {e}") from e
    return data
