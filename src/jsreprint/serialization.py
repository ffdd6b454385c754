"""AST serialization: ESTree dict and JSON round-trip for jsreprint nodes.

Converts typed nodes to/from the plain ESTree shape every JavaScript tool
understands: a ``type`` discriminator, fields under their ESTree names, and
locations as ``{"start": {"line", "column"}, "end": {...}}``. Useful for:
- Feeding parser output into typed nodes (see ``jsreprint.parser``)
- Dumping trees for debugging and inspection
- Exchanging trees with other ESTree tools

Only ``start``/``end`` of a location survive serialization. Back-references
to original nodes are never serialized; a tree restored with ``from_dict``
prints from scratch.

Example:
    from jsreprint import parse
    from jsreprint.serialization import to_json, from_json

    tree = parse("let a = 1;")
    restored = from_json(to_json(tree.program))
    assert restored.body[0].kind == "let"

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

from __future__ import annotations

import json
from typing import Any

from jsreprint.errors import ReprintError
from jsreprint.location import SourceLocation, location_from_dict, location_to_dict
from jsreprint.nodes import Block, Comment, Line, Printable
from jsreprint.schema import NODE_TYPES, get_class_field_infos, get_field_infos

# Fields carried outside the regular field table.
_LOCATION_FIELDS = frozenset({"loc", "range"})

# Comment spellings used by ESTree producers.
_COMMENT_TYPES: dict[str, type[Comment]] = {
    "Line": Line,
    "LineComment": Line,
    "Block": Block,
    "BlockComment": Block,
}


def to_dict(node: Printable) -> dict[str, Any]:
    """Convert a node to an ESTree-shaped, JSON-compatible dict.

    Args:
        node: Any jsreprint node or comment.

    Returns:
        Dict with ``type``, every field under its ESTree name, and ``loc``
        when the node has a location.

    """
    result: dict[str, Any] = {"type": node.type}

    for info in get_field_infos(node):
        if info.name in _LOCATION_FIELDS:
            continue
        value = getattr(node, info.name)
        if info.hidden and not info.diffed:
            continue
        if info.name == "comments" and not value:
            continue
        result[info.estree_name] = _serialize_value(value)

    if node.loc is not None:
        result["loc"] = location_to_dict(node.loc)
    if node.range is not None:
        result["range"] = list(node.range)
    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Printable):
        return to_dict(value)
    if isinstance(value, SourceLocation):
        return location_to_dict(value)
    if isinstance(value, list | tuple):
        return [_serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize_value(item) for key, item in value.items()}
    # Primitives: str, int, float, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Printable:
    """Reconstruct a typed node from an ESTree dict.

    Unknown keys are ignored. A required field missing from ``data`` is set
    to None, the way ESTree spells an absent child.

    Args:
        data: ESTree dict with a ``type`` discriminator.

    Returns:
        Typed node.

    Raises:
        ReprintError: If ``type`` is missing or unknown.

    """
    type_name = data.get("type")
    if type_name is None:
        raise ReprintError("missing 'type' field in serialized node")

    node_cls: type[Printable] | None = _COMMENT_TYPES.get(type_name) or NODE_TYPES.get(type_name)
    if node_cls is None:
        raise ReprintError(f"unknown node type: {type_name!r}")

    kwargs: dict[str, Any] = {}
    for info in get_class_field_infos(node_cls):
        if info.name in _LOCATION_FIELDS:
            continue
        if info.estree_name in data:
            kwargs[info.name] = _deserialize_value(data[info.estree_name])
        elif info.required:
            kwargs[info.name] = None

    if isinstance(kwargs.get("comments"), list):
        kwargs["comments"] = [c for c in kwargs["comments"] if isinstance(c, Comment)]
    if type_name == "Literal" and data.get("regex"):
        kwargs["value"] = None

    node = node_cls(**kwargs)
    node.loc = location_from_dict(data.get("loc"))
    raw_range = data.get("range")
    if raw_range:
        node.range = (int(raw_range[0]), int(raw_range[1]))
    return node


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        if "type" in value and isinstance(value["type"], str):
            return from_dict(value)
        return {key: _deserialize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_deserialize_value(item) for item in value]
    return value


def to_json(node: Printable, *, indent: int | None = None) -> str:
    """Serialize a node to a JSON string.

    Output is deterministic (sorted keys).

    Args:
        node: Node to serialize.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(node), sort_keys=True, indent=indent)


def from_json(data: str) -> Printable:
    """Deserialize a node from a JSON string.

    Raises:
        ReprintError: If the JSON does not describe a known node.

    """
    raw = json.loads(data)
    if not isinstance(raw, dict):
        raise ReprintError(f"expected a JSON object, got {type(raw).__name__}")
    return from_dict(raw)


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
