"""
Tests for option validation and merging.
"""

from datetime import datetime
from unittest.mock import patch

import pytest

from date_extract.config import Config
from date_extract.errors import InvalidConfiguration
from date_extract.validation.options_validator import (
    DEFAULT_SCALAR_DOWNGRADE,
    ExtractOptions,
    OutputFormat,
    PrefersMode,
    ReturnsMode,
    build_downgrade_table,
    coerce_option,
    downgrade,
    library_defaults,
    resolve_options,
)


class TestCoerceOption:
    """Test suite for coerce_option"""

    @pytest.mark.parametrize("field,value,expected", [
        ("returns", "first", ReturnsMode.FIRST),
        ("returns", "ALL_CRON", ReturnsMode.ALL_CRON),
        ("returns", ReturnsMode.LATEST, ReturnsMode.LATEST),
        ("prefers", " future ", PrefersMode.FUTURE),
        ("prefers", PrefersMode.PAST, PrefersMode.PAST),
        ("output", "epoch", OutputFormat.EPOCH),
    ])
    def test_valid_values(self, field, value, expected):
        """Test members and their string values are accepted"""
        assert coerce_option(field, value) is expected

    @pytest.mark.parametrize("field,value", [
        ("returns", "bogus"),
        ("returns", 3),
        ("prefers", "sometimes"),
        ("prefers", ReturnsMode.FIRST),
        ("output", "yaml"),
    ])
    def test_invalid_values(self, field, value):
        """Test unknown values raise InvalidConfiguration naming field and value"""
        with pytest.raises(InvalidConfiguration) as exc_info:
            coerce_option(field, value)

        error = exc_info.value
        assert error.field == field
        assert error.value == value
        assert field in str(error)
        assert repr(value) in str(error)
        assert error.expected


class TestResolveOptions:
    """Test suite for resolve_options"""

    @pytest.fixture
    def defaults(self):
        """Instance-level defaults"""
        return ExtractOptions(
            returns=ReturnsMode.ALL,
            prefers=PrefersMode.FUTURE,
            time_zone="UTC",
        )

    def test_overrides_win(self, defaults):
        """Test call arguments take precedence field by field"""
        options = resolve_options(defaults, returns="last")
        assert options.returns is ReturnsMode.LAST
        assert options.prefers is PrefersMode.FUTURE
        assert options.time_zone == "UTC"

    @pytest.mark.parametrize("missing", [None, "", "  "])
    def test_missing_values_keep_defaults(self, defaults, missing):
        """Test None and empty strings fall back to the defaults"""
        options = resolve_options(defaults, returns=missing, prefers=missing, time_zone=missing)
        assert options == defaults

    def test_defaults_not_modified(self, defaults):
        """Test resolution returns a new object"""
        resolve_options(defaults, returns="first")
        assert defaults.returns is ReturnsMode.ALL

    def test_floating_marker_normalized(self, defaults):
        """Test any spelling of floating is stored the same way"""
        options = resolve_options(defaults, time_zone="Floating")
        assert options.time_zone == Config.FLOATING_TIME_ZONE
        assert options.is_floating is True

    def test_relative_base(self, defaults):
        """Test a relative base can be set per call"""
        base = datetime(2024, 1, 10)
        assert resolve_options(defaults, relative_base=base).relative_base == base

    def test_relative_base_type_checked(self, defaults):
        """Test non-datetime relative bases are rejected"""
        with pytest.raises(InvalidConfiguration) as exc_info:
            resolve_options(defaults, relative_base="2024-01-10")
        assert exc_info.value.field == "relative_base"

    def test_invalid_override(self, defaults):
        """Test invalid call arguments fail"""
        with pytest.raises(InvalidConfiguration) as exc_info:
            resolve_options(defaults, prefers="sometimes")
        assert exc_info.value.field == "prefers"
        assert exc_info.value.value == "sometimes"

    def test_unknown_option(self, defaults):
        """Test unknown option names are a TypeError"""
        with pytest.raises(TypeError):
            resolve_options(defaults, return_type="all")

    def test_library_defaults(self):
        """Test library defaults match the documented values"""
        options = library_defaults()
        assert options.returns is ReturnsMode.FIRST
        assert options.prefers is PrefersMode.NEAREST
        assert options.time_zone == Config.FLOATING_TIME_ZONE
        assert options.output is OutputFormat.DATETIME
        assert options.relative_base is None

    def test_library_defaults_from_config(self):
        """Test Config values feed the library defaults"""
        with patch.object(Config, "DEFAULT_RETURNS", "all_cron"):
            assert library_defaults().returns is ReturnsMode.ALL_CRON

    def test_invalid_library_default(self):
        """Test a bad environment default is reported like any other option"""
        with patch.object(Config, "DEFAULT_PREFERS", "sometimes"):
            with pytest.raises(InvalidConfiguration):
                library_defaults()


class TestScalarDowngrade:
    """Test suite for the list -> single downgrade"""

    @pytest.mark.parametrize("mode,expected", [
        (ReturnsMode.ALL, ReturnsMode.FIRST),
        (ReturnsMode.EARLIEST, ReturnsMode.ALL_CRON),
        (ReturnsMode.FIRST, ReturnsMode.FIRST),
        (ReturnsMode.LAST, ReturnsMode.LAST),
        (ReturnsMode.LATEST, ReturnsMode.LATEST),
        (ReturnsMode.ALL_CRON, ReturnsMode.ALL_CRON),
    ])
    def test_default_table(self, mode, expected):
        """Test the default mapping and identity for everything else"""
        assert downgrade(mode) is expected

    def test_custom_table(self):
        """Test the table can be extended and overridden"""
        table = build_downgrade_table({"all_cron": "first", ReturnsMode.ALL: "last"})
        assert downgrade(ReturnsMode.ALL_CRON, table) is ReturnsMode.FIRST
        assert downgrade(ReturnsMode.ALL, table) is ReturnsMode.LAST
        assert downgrade(ReturnsMode.EARLIEST, table) is ReturnsMode.ALL_CRON

    def test_build_does_not_touch_default(self):
        """Test building a table leaves the shared default alone"""
        build_downgrade_table({"all": "last"})
        assert DEFAULT_SCALAR_DOWNGRADE[ReturnsMode.ALL] is ReturnsMode.FIRST

    def test_invalid_table_entry(self):
        """Test table entries are validated like returns values"""
        with pytest.raises(InvalidConfiguration):
            build_downgrade_table({"all": "bogus"})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
