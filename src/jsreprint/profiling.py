"""Opt-in print profiling for jsreprint.

``profiled_print()`` installs a ``PrintAccumulator`` for the current
context. While it is active, the printer and patcher report:

- top-level print calls and the length of the code they produced
- replacement records spliced into original text
- nodes printed from scratch, counted per node type

The last figure is the one to watch: a small edit that reports many
generic prints usually means an edit escalated further up the tree than
expected (a changed list length, a lost location, a kind change at a
statement position).

Outside ``profiled_print()`` the hooks cost one ContextVar lookup
(``get_print_accumulator()`` returns None).

Example:
    from jsreprint import parse, reprint
    from jsreprint.profiling import profiled_print

    tree = parse("const x = 1 + 2;")
    with profiled_print() as metrics:
        reprint(tree)
    metrics.summary()
    # {"total_ms": 0.4, "print_calls": 1, "reprinted_nodes": 0, ...}

"""

from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class PrintAccumulator:
    """Counters filled in by one ``profiled_print()`` block.

    Attributes:
        start_time: ``perf_counter()`` value when profiling started
        print_calls: Top-level ``Printer.print``/``print_generically`` calls
        source_length: Total length of the code those calls returned
        reprinted_nodes: Replacement records applied by the patcher
        generic_kinds: Node type name -> times printed from scratch

    """

    start_time: float = field(default_factory=perf_counter)
    print_calls: int = 0
    source_length: int = 0
    reprinted_nodes: int = 0
    generic_kinds: Counter[str] = field(default_factory=Counter)

    def record_print(self, source_length: int) -> None:
        self.print_calls += 1
        self.source_length += source_length

    def record_reprints(self, count: int) -> None:
        self.reprinted_nodes += count

    def record_generic_print(self, node_type: str) -> None:
        self.generic_kinds[node_type] += 1

    @property
    def generic_prints(self) -> int:
        """Nodes printed from scratch, all types together."""
        return self.generic_kinds.total()

    @property
    def total_duration_ms(self) -> float:
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Snapshot of the counters as a plain dict.

        ``generic_kinds`` lists the most frequently regenerated node types
        first.
        """
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "print_calls": self.print_calls,
            "source_length": self.source_length,
            "reprinted_nodes": self.reprinted_nodes,
            "generic_prints": self.generic_prints,
            "generic_kinds": dict(self.generic_kinds.most_common()),
        }


_accumulator: ContextVar[PrintAccumulator | None] = ContextVar(
    "print_accumulator",
    default=None,
)


def get_print_accumulator() -> PrintAccumulator | None:
    """The active accumulator, or None when profiling is off."""
    return _accumulator.get()


@contextmanager
def profiled_print() -> Iterator[PrintAccumulator]:
    """Collect print metrics for the duration of the ``with`` block.

    Yields:
        The accumulator the printer reports into; read it after the block.

    """
    acc = PrintAccumulator()
    token: Token[PrintAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = ["PrintAccumulator", "get_print_accumulator", "profiled_print"]
