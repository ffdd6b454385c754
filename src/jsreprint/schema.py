"""Field-descriptor table for node classes.

The differ, the comment attacher and the copier never switch on node kind.
They walk nodes through this table, built once at import time from the
dataclass fields of every concrete class in ``jsreprint.nodes``.

Each ``FieldInfo`` records the Python name, the ESTree name, a default
thunk and whether the field is hidden from generic traversal.

Example:
    >>> get_field_names(BinaryExpression(operator="+", left=a, right=b))
    ('operator', 'left', 'right')
    >>> is_kind(Identifier(name="x"), "Pattern")
    True

"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterator
from dataclasses import MISSING, dataclass
from typing import Any

from jsreprint import nodes
from jsreprint.nodes import Printable


@dataclass(frozen=True, slots=True)
class FieldInfo:
    """Descriptor of one node field.

    Attributes:
        name: Python attribute name
        estree_name: Key used in ESTree dicts
        default: Thunk producing the default value (None if required)
        hidden: Excluded from generic traversal
        diffed: Compared by the differ even though hidden

    """

    name: str
    estree_name: str
    default: Callable[[], Any] | None
    hidden: bool = False
    diffed: bool = False

    @property
    def required(self) -> bool:
        return self.default is None


def _field_info(f: dataclasses.Field[Any]) -> FieldInfo:
    if f.default is not MISSING:
        value = f.default

        def default() -> Any:
            return value

    elif f.default_factory is not MISSING:
        default = f.default_factory
    else:
        default = None  # type: ignore[assignment]
    return FieldInfo(
        name=f.name,
        estree_name=f.metadata.get("estree", f.name),
        default=default,
        hidden=bool(f.metadata.get("hidden")),
        diffed=bool(f.metadata.get("diffed")),
    )


def _collect_node_types() -> dict[str, type[Printable]]:
    registry: dict[str, type[Printable]] = {}
    for name in nodes.__all__:
        cls = getattr(nodes, name)
        if isinstance(cls, type) and issubclass(cls, Printable) and not cls.__dict__.get("_abstract"):
            registry[name] = cls
    return registry


# Concrete node classes by type tag.
NODE_TYPES: dict[str, type[Printable]] = _collect_node_types()

# Supertype names usable with is_kind.
_KINDS: dict[str, type[Printable]] = {
    name: getattr(nodes, name)
    for name in nodes.__all__
    if isinstance(getattr(nodes, name), type) and issubclass(getattr(nodes, name), Printable)
}

_FIELDS: dict[type[Printable], tuple[FieldInfo, ...]] = {
    cls: tuple(_field_info(f) for f in dataclasses.fields(cls)) for cls in NODE_TYPES.values()
}

_VISIBLE: dict[type[Printable], tuple[str, ...]] = {
    cls: tuple(info.name for info in infos if not info.hidden) for cls, infos in _FIELDS.items()
}

_DIFFED: dict[type[Printable], tuple[str, ...]] = {
    cls: tuple(info.name for info in infos if not info.hidden or info.diffed)
    for cls, infos in _FIELDS.items()
}

_BY_NAME: dict[type[Printable], dict[str, FieldInfo]] = {
    cls: {info.name: info for info in infos} for cls, infos in _FIELDS.items()
}


def is_node(value: Any) -> bool:
    """True for any typed node or comment."""
    return isinstance(value, Printable)


def node_class(type_name: str) -> type[Printable]:
    """Concrete node class for an ESTree ``type`` tag.

    Raises:
        KeyError: For unknown tags
    """
    return NODE_TYPES[type_name]


def is_kind(value: Any, kind: str) -> bool:
    """True if ``value`` is a node of kind ``kind`` or one of its subtypes.

    Unknown kind names are never matched.
    """
    cls = _KINDS.get(kind)
    return cls is not None and isinstance(value, cls)


def get_field_infos(node: Printable) -> tuple[FieldInfo, ...]:
    return _FIELDS[type(node)]


def get_class_field_infos(cls: type[Printable]) -> tuple[FieldInfo, ...]:
    """Field descriptors of a concrete node class."""
    return _FIELDS[cls]


def get_field_names(node: Printable) -> tuple[str, ...]:
    """Names of the fields generic traversal visits, in declaration order."""
    return _VISIBLE[type(node)]


def get_diff_field_names(node: Printable) -> tuple[str, ...]:
    """Names of the fields structural comparison visits."""
    return _DIFFED[type(node)]


def get_field_info(node: Printable, name: str) -> FieldInfo:
    return _BY_NAME[type(node)][name]


def get_field_value(node: Printable, name: str) -> Any:
    """Value of field ``name``, substituting the declared default for None.

    ``None`` in a list-typed field reads as an empty list, so an absent
    optional field and an explicit default look the same.
    """
    value = getattr(node, name, None)
    if value is None:
        info = _BY_NAME[type(node)].get(name)
        if info is not None and info.default is not None:
            return info.default()
    return value


def iter_fields(node: Printable) -> Iterator[tuple[str, Any]]:
    """Yield ``(name, value)`` for every visible field."""
    for name in get_field_names(node):
        yield name, get_field_value(node, name)


def each_field(node: Printable, callback: Callable[[str, Any], None]) -> None:
    for name, value in iter_fields(node):
        callback(name, value)


def some_field(node: Printable, predicate: Callable[[str, Any], bool]) -> bool:
    """True if ``predicate`` holds for any visible field."""
    return any(predicate(name, value) for name, value in iter_fields(node))


__all__ = [
    "NODE_TYPES",
    "FieldInfo",
    "each_field",
    "get_class_field_infos",
    "get_diff_field_names",
    "get_field_info",
    "get_field_infos",
    "get_field_names",
    "get_field_value",
    "is_kind",
    "is_node",
    "iter_fields",
    "node_class",
    "some_field",
]
