"""
Unit tests for input validators and CLI error reporting.
"""

from pathlib import Path

import pytest

from myprof.validation import (
    ErrorSeverity,
    UsageError,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_directory,
    validate_enum_choice,
    validate_exclusion_entry,
    validate_positive_float,
)


@pytest.mark.unit
class TestNumberValidation:
    """Test cases for validate_positive_float."""

    def test_accepts_strings_and_numbers(self):
        assert validate_positive_float("2.5") == 2.5
        assert validate_positive_float(0) == 0.0

    @pytest.mark.parametrize("value", ["abc", None, "nan", -0.5])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            validate_positive_float(value, field_name="min_percent")

    def test_upper_bound(self):
        with pytest.raises(ValidationError):
            validate_positive_float(150, max_value=100.0)


@pytest.mark.unit
class TestChoiceValidation:
    """Test cases for validate_enum_choice."""

    def test_case_insensitive_returns_canonical_spelling(self):
        assert validate_enum_choice("info", ["DEBUG", "INFO"], case_sensitive=False) == "INFO"

    def test_case_sensitive(self):
        with pytest.raises(ValidationError):
            validate_enum_choice("Flat", ["flat"])


@pytest.mark.unit
class TestDirectoryValidation:
    """Test cases for validate_directory."""

    def test_relative_to_base(self, temp_dir):
        (temp_dir / "out").mkdir()
        assert validate_directory("out", base_dir=temp_dir) == Path("out")

    def test_missing(self, temp_dir):
        with pytest.raises(ValidationError):
            validate_directory(temp_dir / "absent")

    def test_regular_file(self, temp_dir):
        path = temp_dir / "file.txt"
        path.write_text("")
        with pytest.raises(ValidationError) as exc_info:
            validate_directory(path)
        assert "not a directory" in str(exc_info.value)


@pytest.mark.unit
class TestExclusionEntryValidation:
    """Test cases for splitting exclusion entries."""

    @pytest.mark.parametrize("entry,expected", [
        ("Klass#method", ("Klass", "#", "method")),
        ("pkg.mod.Klass#method", ("pkg.mod.Klass", "#", "method")),
        ("pkg.mod.function", ("pkg.mod", ".", "function")),
        ("Outer.Inner.build", ("Outer.Inner", ".", "build")),
        (" Klass#method ", ("Klass", "#", "method")),
    ])
    def test_valid(self, entry, expected):
        assert validate_exclusion_entry(entry) == expected

    @pytest.mark.parametrize("entry", ["", "method", "Klass#", "#method", "..m", "Klass#a#"])
    def test_invalid(self, entry):
        with pytest.raises(ValidationError):
            validate_exclusion_entry(entry)


@pytest.mark.unit
class TestErrorHandling:
    """Test cases for the error helpers."""

    def test_handle_error_reraises(self):
        with pytest.raises(KeyError):
            handle_error(KeyError("x"), "lookup")

    def test_handle_error_logs(self, caplog):
        handle_error(ValueError("bad"), "parsing", severity=ErrorSeverity.WARNING, reraise=False)
        assert "Error in parsing: bad" in caplog.text

    def test_handle_cli_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(UsageError("unrecognized arguments: --bogus"), "parsing", usage="usage: myprof\n")

        assert exc_info.value.code == 1
        assert capsys.readouterr().err == "usage: myprof\nerror: unrecognized arguments: --bogus\n"
