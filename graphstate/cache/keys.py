"""
=============================================================================
Cache Key Derivation
=============================================================================

The default cache key is a SHA-256 fingerprint of a canonical JSON
encoding of the node input. The same logical content always produces the
same bytes within a process, otherwise lookups would never hit; different
content must never share a key, otherwise a hit returns another input's
result.

Every value is encoded as a [type_tag, payload] pair, so user data can
never look like an encoded marker and {1: ..} differs from {"1": ..}:

- dicts become key-sorted lists of [key, value] pairs (keys stay typed)
- lists and tuples keep their order (order-sensitive)
- sets are sorted by their encoded members
- pydantic models and dataclasses are walked field by field
- bytes are hex-encoded
- anything else falls back to repr()
=============================================================================
"""

import dataclasses
import hashlib
import json
from typing import Any

from pydantic import BaseModel


def _sort_key(encoded: Any) -> str:
    return json.dumps(encoded, sort_keys=True, separators=(",", ":"))


def _type_name(value: Any) -> str:
    cls = type(value)
    return f"{cls.__module__}.{cls.__qualname__}"


def _canonical(value: Any) -> list:
    # bool before int: bool is an int subclass
    if value is None:
        return ["none", None]
    if isinstance(value, bool):
        return ["bool", value]
    if isinstance(value, int):
        return ["int", value]
    if isinstance(value, float):
        return ["float", repr(value)]
    if isinstance(value, str):
        return ["str", value]
    if isinstance(value, (bytes, bytearray)):
        return ["bytes", bytes(value).hex()]
    if isinstance(value, BaseModel):
        fields = [[name, _canonical(getattr(value, name))] for name in type(value).model_fields]
        return ["model", _type_name(value), fields]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = [[f.name, _canonical(getattr(value, f.name))] for f in dataclasses.fields(value)]
        return ["dataclass", _type_name(value), fields]
    if isinstance(value, dict):
        pairs = [[_canonical(k), _canonical(v)] for k, v in value.items()]
        return ["dict", sorted(pairs, key=lambda pair: _sort_key(pair[0]))]
    if isinstance(value, list):
        return ["list", [_canonical(v) for v in value]]
    if isinstance(value, tuple):
        return ["tuple", [_canonical(v) for v in value]]
    if isinstance(value, (set, frozenset)):
        return ["set", sorted((_canonical(v) for v in value), key=_sort_key)]
    return ["repr", _type_name(value), repr(value)]


def canonical_json(inputs: Any) -> str:
    """Deterministic JSON text for `inputs`."""
    return json.dumps(_canonical(inputs), separators=(",", ":"), ensure_ascii=False)


def canonical_serialize(inputs: Any) -> str:
    """Fingerprint of `inputs`, used as the default cache key."""
    return hashlib.sha256(canonical_json(inputs).encode("utf-8")).hexdigest()
