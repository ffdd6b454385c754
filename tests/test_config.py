"""Tests for jsreprint.config: options, validation and the ContextVar."""

from __future__ import annotations

import threading

import pytest

from jsreprint import ReprintConfig, config_context, get_config, parse, reset_config, set_config
from jsreprint.config import normalize_options
from jsreprint.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self) -> None:
        config = ReprintConfig()
        assert config.tab_width is None
        assert config.effective_tab_width == 4
        assert config.reuse_whitespace
        assert config.quote == "auto"
        assert config.wrap_column == 74
        assert config.source_type == "module"

    def test_frozen(self) -> None:
        config = ReprintConfig()
        with pytest.raises(AttributeError):
            config.tab_width = 2  # type: ignore[misc]


class TestFromDict:
    def test_snake_case(self) -> None:
        config = ReprintConfig.from_dict({"tab_width": 2, "use_tabs": True})
        assert config.tab_width == 2
        assert config.use_tabs

    def test_camel_case(self) -> None:
        config = ReprintConfig.from_dict(
            {"tabWidth": 8, "reuseWhitespace": False, "sourceFileName": "a.js"}
        )
        assert config.tab_width == 8
        assert not config.reuse_whitespace
        assert config.source_file_name == "a.js"

    def test_unknown_keys_ignored(self) -> None:
        assert ReprintConfig.from_dict({"flowObjectCommas": True}) == ReprintConfig()

    def test_invalid_value_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ReprintConfig.from_dict({"quote": "backtick"})


class TestNormalizeOptions:
    def test_overrides_apply(self) -> None:
        config = normalize_options(ReprintConfig(), tab_width=2)
        assert config.tab_width == 2

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown option"):
            normalize_options(ReprintConfig(), tabs=2)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"tab_width": 0},
            {"wrap_column": 0},
            {"quote": "backtick"},
            {"source_type": "commonjs"},
        ],
    )
    def test_out_of_range(self, overrides: dict[str, object]) -> None:
        with pytest.raises(ConfigurationError):
            normalize_options(ReprintConfig(), **overrides)

    def test_uses_ambient_config(self) -> None:
        with config_context(ReprintConfig(tab_width=3)):
            assert normalize_options().tab_width == 3

    def test_parse_reports_bad_option(self) -> None:
        with pytest.raises(ConfigurationError):
            parse("a;", tab_width=-1)


class TestContext:
    def test_set_and_reset(self) -> None:
        set_config(ReprintConfig(use_tabs=True))
        assert get_config().use_tabs
        reset_config()
        assert not get_config().use_tabs

    def test_context_restores(self) -> None:
        outer = ReprintConfig(tab_width=2)
        set_config(outer)
        with config_context(ReprintConfig(tab_width=8)):
            assert get_config().tab_width == 8
        assert get_config() is outer

    def test_context_restores_after_error(self) -> None:
        with pytest.raises(RuntimeError), config_context(ReprintConfig(tab_width=8)):
            raise RuntimeError("boom")
        assert get_config().tab_width is None

    def test_threads_are_isolated(self) -> None:
        seen: list[int | None] = []

        def worker() -> None:
            seen.append(get_config().tab_width)

        with config_context(ReprintConfig(tab_width=8)):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()
        assert seen == [None]
