"""ContextVar-based reprint configuration for jsreprint.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Top-level functions (``parse``, ``reprint``, ``pretty_print``) read the
ambient configuration unless an explicit one is passed.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    from jsreprint.config import ReprintConfig, config_context

    with config_context(ReprintConfig(tab_width=2, quote="single")):
        result = reprint(tree)

"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Literal

from jsreprint.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ReprintConfig:
    """Immutable parse/print configuration.

    Frozen dataclass ensures thread-safety (immutable after creation).

    Attributes:
        tab_width: Columns per tab. ``None`` means "not specified": parsing
            assumes 4 and printing guesses the width of each reused buffer.
        use_tabs: Emit tabs instead of spaces for indentation
        reuse_whitespace: Copy original indentation characters (and blank
            lines between statements) instead of regenerating them
        line_terminator: Line terminator for output. ``None`` keeps the
            terminator found in the parsed source (``"\\n"`` if none)
        wrap_column: Advisory line width for the generic printer
        source_file_name: Name of the parsed file, enables source maps
        source_map_name: Name of the generated file in the emitted map
        source_root: Optional ``sourceRoot`` for the emitted map
        input_source_map: Map of the parsed source, composed with the output
        range: Ask the parser for character ranges
        tolerant: Let the parser recover from some syntax errors
        jsx: Enable JSX syntax
        source_type: ``"module"`` or ``"script"``
        quote: Preferred string quote for freshly printed literals
        trailing_comma: Add trailing commas to multi-line lists
        array_bracket_spacing: Print ``[ a, b ]`` instead of ``[a, b]``
        object_curly_spacing: Print ``{ a }`` instead of ``{a}``
        arrow_parens_always: Parenthesize single arrow-function parameters
        tokens: Keep the token array on the ``File`` node

    """

    tab_width: int | None = None
    use_tabs: bool = False
    reuse_whitespace: bool = True
    line_terminator: str | None = None
    wrap_column: int = 74
    source_file_name: str | None = None
    source_map_name: str | None = None
    source_root: str | None = None
    input_source_map: dict[str, Any] | None = None
    range: bool = False
    tolerant: bool = True
    jsx: bool = False
    source_type: Literal["module", "script"] = "module"
    quote: Literal["auto", "single", "double"] = "auto"
    trailing_comma: bool = False
    array_bracket_spacing: bool = False
    object_curly_spacing: bool = True
    arrow_parens_always: bool = False
    tokens: bool = True

    @property
    def effective_tab_width(self) -> int:
        """Tab width to use when none was specified."""
        return self.tab_width if self.tab_width is not None else 4

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> ReprintConfig:
        """Create ReprintConfig from a dictionary.

        Accepts snake_case field names as well as the camelCase spellings
        common in JavaScript tooling (``tabWidth``, ``reuseWhitespace``...).
        Unknown keys are silently ignored.

        Example:
            >>> config = ReprintConfig.from_dict({"tabWidth": 2, "quote": "single"})
            >>> config.tab_width
            2

        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = _snake_case(key)
            if name in valid_fields:
                filtered[name] = value
        return normalize_options(cls(), **filtered)


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)([A-Z])", r"_\1", name).lower()


def normalize_options(config: ReprintConfig | None = None, **overrides: Any) -> ReprintConfig:
    """Return ``config`` (or the ambient config) with ``overrides`` applied.

    Raises:
        ConfigurationError: On unknown option names or out-of-range values
    """
    base = config if config is not None else get_config()
    if overrides:
        try:
            base = dataclasses.replace(base, **overrides)
        except TypeError as exc:
            raise ConfigurationError(f"unknown option: {exc}") from exc
    if base.tab_width is not None and base.tab_width < 1:
        raise ConfigurationError(f"tab_width must be positive, got {base.tab_width}")
    if base.quote not in ("auto", "single", "double"):
        raise ConfigurationError(f"unsupported quote style {base.quote!r}")
    if base.source_type not in ("module", "script"):
        raise ConfigurationError(f"unsupported source_type {base.source_type!r}")
    if base.wrap_column < 1:
        raise ConfigurationError(f"wrap_column must be positive, got {base.wrap_column}")
    return base


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ReprintConfig = ReprintConfig()

# Thread-local configuration via ContextVar
_reprint_config: ContextVar[ReprintConfig] = ContextVar(
    "reprint_config",
    default=_DEFAULT_CONFIG,
)


def get_config() -> ReprintConfig:
    """Get current configuration (thread-local)."""
    return _reprint_config.get()


def set_config(config: ReprintConfig) -> None:
    """Set configuration for the current context."""
    _reprint_config.set(config)


def reset_config() -> None:
    """Reset to the default configuration."""
    _reprint_config.set(_DEFAULT_CONFIG)


@contextmanager
def config_context(config: ReprintConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Example:
        >>> with config_context(ReprintConfig(use_tabs=True)):
        ...     code = reprint(tree).code
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _reprint_config.get()
    _reprint_config.set(config)
    try:
        yield
    finally:
        _reprint_config.set(previous)


__all__ = [
    "ReprintConfig",
    "config_context",
    "get_config",
    "normalize_options",
    "reset_config",
    "set_config",
]
