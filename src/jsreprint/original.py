"""Copy-to-original side table.

``parse`` hands callers a deep copy of the parsed tree. Each copied node is
associated here with the node it was copied from, so the differ can find
"what was here before" without a second tree being passed around. The
association lives outside the nodes: generic traversal, equality and
serialization never see it.

Keys are held weakly, so the entries of a copy disappear with the copy.
Values are held strongly, keeping the pristine tree alive for as long as
any copy derived from it.

A key mapped to None marks a node as brand new: it is never reused, even
if it was copied from a parsed node.

Thread Safety:
    Writes are serialized with a lock. Reads are lock-free lookups in a
    WeakKeyDictionary.

"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING
from weakref import WeakKeyDictionary

if TYPE_CHECKING:
    from jsreprint.nodes import Printable

_originals: WeakKeyDictionary[Printable, Printable | None] = WeakKeyDictionary()
_lock = threading.Lock()


def set_original(copy: Printable, original: Printable | None) -> None:
    """Record that ``copy`` was derived from ``original``."""
    with _lock:
        _originals[copy] = original


def get_original(node: Printable) -> Printable | None:
    """The node ``node`` was copied from, or None."""
    return _originals.get(node)


def has_original(node: Printable) -> bool:
    """True if ``node`` is linked to a parsed original."""
    return _originals.get(node) is not None


def mark_as_new(node: Printable) -> None:
    """Force ``node`` to be printed from scratch instead of reused."""
    set_original(node, None)


def is_marked_new(node: Printable) -> bool:
    """True if ``mark_as_new`` was called on ``node``."""
    return node in _originals and _originals[node] is None


__all__ = [
    "get_original",
    "has_original",
    "is_marked_new",
    "mark_as_new",
    "set_original",
]
