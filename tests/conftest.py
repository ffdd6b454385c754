"""Shared fixtures for jsreprint tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from jsreprint import File, parse
from jsreprint.config import reset_config


@pytest.fixture(autouse=True)
def _reset_config() -> Iterator[None]:
    """Keep ContextVar configuration from leaking between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def parse_js() -> Callable[..., File]:
    """Parse JavaScript source with test-friendly defaults."""

    def _parse(source: str, **options: object) -> File:
        return parse(source, **options)

    return _parse
