"""Tree differ: decide which parts of an edited tree can reuse original text.

Walks a new (possibly edited) tree and its original in lockstep, through
the schema's field table rather than per-kind code, and collects
``Reprint`` records: pairs of cursors, one at an original node with a
usable location and one at the new node to print in its place.

Every ``find_*`` function returns a plain bool. ``False`` means
"unreprintable at this level": the caller degrades to regenerating an
enclosing node. It is the normal outcome of an edit, never an error.

Example:
    >>> tree = parse("const x = 1 + 2;")
    >>> tree.program.body[0].declarations[0].init.right = Literal(value=3)
    >>> reprints = []
    >>> find_reprints(PathCursor.from_node(tree), reprints)
    True
    >>> len(reprints)
    1

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsreprint.nodes import Expression, Printable, ReturnStatement
from jsreprint.original import get_original, is_marked_new
from jsreprint.path import PathCursor
from jsreprint.schema import get_diff_field_names, get_field_value
from jsreprint.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Reprint:
    """A replacement record.

    Attributes:
        old_path: Cursor at the original node whose text gets replaced
        new_path: Cursor at the node to print in its place

    """

    old_path: PathCursor
    new_path: PathCursor

    @property
    def old_node(self) -> Any:
        return self.old_path.get_value()

    @property
    def new_node(self) -> Any:
        return self.new_path.get_value()


def _same_primitive(a: Any, b: Any) -> bool:
    return type(a) is type(b) and a == b


def find_reprints(new_path: PathCursor, reprints: list[Reprint]) -> bool:
    """Collect the records needed to print ``new_path``'s node by patching
    the text of its original.

    Args:
        new_path: Cursor at a node that was copied from a parsed node
        reprints: Output list (must be empty); cleared on failure

    Returns:
        True if the node can be printed by patching its original's text
    """
    new_node = new_path.get_value()
    old_node = get_original(new_node) if isinstance(new_node, Printable) else None
    if old_node is None:
        return False
    if reprints:
        raise ValueError("find_reprints expects an empty output list")
    if new_node.type != old_node.type:
        return False

    old_path = PathCursor(old_node)
    can_reprint = find_child_reprints(new_path, old_path, reprints)
    if not can_reprint:
        reprints.clear()
    return can_reprint


def find_any_reprints(new_path: PathCursor, old_path: PathCursor, reprints: list[Reprint]) -> bool:
    """Dispatch on the shape of the value under ``new_path``."""
    new_value = new_path.get_value()
    old_value = old_path.get_value()

    if new_value is old_value:
        return True
    if isinstance(new_value, list):
        return find_array_reprints(new_path, old_path, reprints)
    if isinstance(new_value, Printable):
        return find_object_reprints(new_path, old_path, reprints)
    if isinstance(new_value, dict):
        return isinstance(old_value, dict) and new_value == old_value
    return _same_primitive(new_value, old_value)


def find_array_reprints(new_path: PathCursor, old_path: PathCursor, reprints: list[Reprint]) -> bool:
    """Compare two lists element by element; any length change fails."""
    new_list = new_path.get_value()
    old_list = old_path.get_value()

    if new_list is old_list or new_path.value_is_duplicate() or old_path.value_is_duplicate():
        return True
    if not isinstance(old_list, list) or len(old_list) != len(new_list):
        return False

    for i, (new_item, old_item) in enumerate(zip(new_list, old_list, strict=True)):
        new_path.stack += [i, new_item]
        old_path.stack += [i, old_item]
        try:
            can_reprint = find_any_reprints(new_path, old_path, reprints)
        finally:
            del new_path.stack[-2:]
            del old_path.stack[-2:]
        if not can_reprint:
            return False
    return True


def find_object_reprints(new_path: PathCursor, old_path: PathCursor, reprints: list[Reprint]) -> bool:
    """Compare two nodes, recording a replacement when their fields differ."""
    new_node = new_path.get_value()
    old_node = old_path.get_value()

    if not isinstance(old_node, Printable):
        return False
    if new_node is old_node or new_path.value_is_duplicate() or old_path.value_is_duplicate():
        return True

    if new_node.type == old_node.type:
        child_reprints: list[Reprint] = []
        if find_child_reprints(new_path, old_path, child_reprints):
            reprints.extend(child_reprints)
        elif old_node.loc is not None:
            reprints.append(Reprint(old_path.copy(), new_path.copy()))
        else:
            logger.debug("no location to patch %s; regenerating parent", old_node.type)
            return False
        return True

    # Any expression can stand in for any other expression.
    if isinstance(new_node, Expression) and isinstance(old_node, Expression) and old_node.loc is not None:
        reprints.append(Reprint(old_path.copy(), new_path.copy()))
        return True

    logger.debug("kind changed from %s to %s; regenerating parent", old_node.type, new_node.type)
    return False


def find_child_reprints(new_path: PathCursor, old_path: PathCursor, reprints: list[Reprint]) -> bool:
    """Compare every field of two nodes of the same kind."""
    new_node = new_path.get_value()
    old_node = old_path.get_value()

    if is_marked_new(new_node):
        return False

    # A node that cannot open a statement must keep the parentheses the
    # original text gave it.
    if (
        not new_path.can_be_first_in_statement()
        and new_path.first_in_statement()
        and not old_path.has_parens()
    ):
        return False

    names = list(get_diff_field_names(new_node))
    for name in get_diff_field_names(old_node):
        if name not in names:
            names.append(name)

    original_count = len(reprints)
    for name in names:
        new_path.stack += [name, get_field_value(new_node, name)]
        old_path.stack += [name, get_field_value(old_node, name)]
        try:
            can_reprint = find_any_reprints(new_path, old_path, reprints)
        finally:
            del new_path.stack[-2:]
            del old_path.stack[-2:]
        if not can_reprint:
            return False

    # An edit inside a return argument may need the whole statement
    # reprinted to keep its terminator.
    if isinstance(new_path.get_node(), ReturnStatement) and len(reprints) > original_count:
        logger.debug("escalating edited return statement")
        return False

    return True


__all__ = [
    "Reprint",
    "find_any_reprints",
    "find_array_reprints",
    "find_child_reprints",
    "find_object_reprints",
    "find_reprints",
]
