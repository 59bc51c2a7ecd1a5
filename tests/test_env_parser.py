"""Tests for parsing secret note content into environment variables."""
import logging

import pytest

from rbwchain.secrets.domains.env_parser import parse_env_vars, validate_env_name
from rbwchain.secrets.domains.errors import ConfigError


class TestParseEnvVars:
    """Test suite for parse_env_vars."""

    def test_parses_key_value_lines(self, run_logger):
        """Test that well-formed lines become variables."""
        result = parse_env_vars("DB_USER=alice\nDB_PASS=s3cret\n", run_logger)
        assert result == {"DB_USER": "alice", "DB_PASS": "s3cret"}

    def test_trims_key_and_value(self, run_logger):
        """Test that whitespace around the line, key and value is removed."""
        result = parse_env_vars("   API_KEY \t=   abc123  \n\tHOST=  db.local\t", run_logger)
        assert result == {"API_KEY": "abc123", "HOST": "db.local"}

    def test_splits_at_first_equals(self, run_logger):
        """Test that only the first '=' separates key from value."""
        result = parse_env_vars("URL=postgres://u:p@h/db?sslmode=require", run_logger)
        assert result == {"URL": "postgres://u:p@h/db?sslmode=require"}

    def test_empty_value_is_kept(self, run_logger):
        """Test that KEY= yields an empty string value."""
        assert parse_env_vars("EMPTY=", run_logger) == {"EMPTY": ""}

    def test_skips_blank_comment_and_invalid_lines(self, run_logger):
        """Test that blank, comment and '='-less lines contribute nothing."""
        content = "\n   \n# COMMENTED=out\n  #indented=comment\njust some text\nKEEP=yes\n"
        assert parse_env_vars(content, run_logger) == {"KEEP": "yes"}

    def test_skips_empty_key(self, run_logger):
        """Test that a line with nothing before '=' is skipped."""
        assert parse_env_vars("  =value\nOK=1", run_logger) == {"OK": "1"}

    def test_last_duplicate_wins(self, run_logger):
        """Test that a repeated key keeps the last value."""
        result = parse_env_vars("TOKEN=first\nOTHER=x\nTOKEN=second\n", run_logger)
        assert result == {"TOKEN": "second", "OTHER": "x"}

    def test_handles_crlf_line_endings(self, run_logger):
        """Test that Windows line endings are handled."""
        assert parse_env_vars("A=1\r\nB=2\r\n", run_logger) == {"A": "1", "B": "2"}

    def test_form_feed_inside_value_is_kept(self, run_logger):
        """Test that a form feed does not split a value into two lines."""
        assert parse_env_vars("KEY=a\x0cb\n", run_logger) == {"KEY": "a\x0cb"}

    def test_unicode_line_separator_inside_value_is_kept(self, run_logger, caplog):
        """Test that U+2028 inside a value is part of the value, not a line break."""
        caplog.set_level(logging.DEBUG)

        assert parse_env_vars("KEY=a\u2028b", run_logger) == {"KEY": "a\u2028b"}
        assert "Skipping" not in caplog.text

    @pytest.mark.parametrize("separator", ["\x0b", "\x1c", "\x1d", "\x1e", "\x85", "\u2029"])
    def test_only_newline_separates_lines(self, separator, run_logger):
        """Test that other line-break characters stay inside the value."""
        content = f"A=x{separator}y\nB=2\n"
        assert parse_env_vars(content, run_logger) == {"A": f"x{separator}y", "B": "2"}

    def test_empty_content(self, run_logger):
        """Test that empty content yields an empty mapping."""
        assert parse_env_vars("", run_logger) == {}

    def test_parsing_is_repeatable(self, run_logger):
        """Test that parsing the same content twice gives the same mapping."""
        content = "A=1\n# c\nB = 2\nA=3\nnoise\n"
        assert parse_env_vars(content, run_logger) == parse_env_vars(content, run_logger)

    def test_nul_in_key_rejected(self, run_logger):
        """Test that a key with a NUL byte raises ConfigError."""
        with pytest.raises(ConfigError):
            parse_env_vars("BAD\x00KEY=value", run_logger)

    def test_nul_in_value_rejected_without_printing_value(self, run_logger):
        """Test that a value with a NUL byte raises ConfigError naming only the key."""
        with pytest.raises(ConfigError) as exc_info:
            parse_env_vars("KEY=hunter\x002", run_logger)

        assert "KEY" in str(exc_info.value)
        assert "hunter" not in str(exc_info.value)


class TestParseWarnings:
    """Test warnings emitted for skipped lines."""

    def test_warns_for_line_without_equals(self, run_logger, caplog):
        """Test that a '='-less line is reported by line number."""
        caplog.set_level(logging.DEBUG)
        parse_env_vars("A=1\nsupersecretvalue\n", run_logger)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "line 2" in warnings[0].getMessage()

    def test_warnings_never_include_line_content(self, run_logger, caplog):
        """Test that skipped line content is not logged."""
        caplog.set_level(logging.DEBUG)
        parse_env_vars("supersecretvalue\n=alsosecret\n", run_logger)

        assert "supersecretvalue" not in caplog.text
        assert "alsosecret" not in caplog.text

    def test_no_warning_for_comments_and_blank_lines(self, run_logger, caplog):
        """Test that comments and blank lines are skipped silently."""
        caplog.set_level(logging.DEBUG)
        parse_env_vars("\n# comment\n   \n", run_logger)

        assert caplog.records == []


class TestValidateEnvName:
    """Test suite for validate_env_name."""

    @pytest.mark.parametrize("name", ["DB_USER", "lower_case", ".env", "A1", "with-dash"])
    def test_accepts_valid_names(self, name):
        """Test that names without '=' or NUL are accepted."""
        validate_env_name(name)

    @pytest.mark.parametrize("name", ["", "A=B", "NUL\x00NAME"])
    def test_rejects_invalid_names(self, name):
        """Test that empty names and names with '=' or NUL are rejected."""
        with pytest.raises(ConfigError):
            validate_env_name(name)
