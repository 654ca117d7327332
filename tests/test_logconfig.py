"""Tests for logging configuration."""

import logging

import pytest

from coastercurve.logconfig import (
    CATEGORIES,
    OFF,
    RULES_ENV_VAR,
    LoggingConfig,
    parse_rules,
    rules_for_level,
    setup_logging,
)


pytestmark = pytest.mark.usefixtures("reset_logging")


class TestRules:
    """Test level presets and rule strings."""

    def test_level_preset_covers_categories(self):
        rules = rules_for_level("debug")

        assert set(rules) == set(CATEGORIES)
        assert all(level == logging.DEBUG for level in rules.values())

    def test_off_preset(self):
        """'off' silences even critical messages."""
        rules = rules_for_level("OFF")

        assert all(level == OFF for level in rules.values())
        assert OFF > logging.CRITICAL

    def test_unknown_preset(self):
        assert rules_for_level("verbose") == {}

    def test_parse_rules(self):
        rules = parse_rules("coastercurve.export=DEBUG;coastercurve.forces=off")

        assert rules == {
            "coastercurve.export": logging.DEBUG,
            "coastercurve.forces": OFF,
        }

    def test_parse_rules_separators(self):
        """Commas and newlines separate rules too."""
        rules = parse_rules("a=info,b=warning\nc=error")

        assert rules == {"a": logging.INFO, "b": logging.WARNING, "c": logging.ERROR}

    def test_parse_rules_skips_bad_entries(self):
        rules = parse_rules("a=loud;noequals;=debug;b=debug")

        assert rules == {"b": logging.DEBUG}


class TestSetupLogging:
    """Test applying a logging configuration."""

    def test_level_applied_to_categories(self):
        setup_logging(LoggingConfig(level="WARNING"))

        for name in CATEGORIES:
            assert logging.getLogger(name).level == logging.WARNING

    def test_rules_override_level(self):
        applied = setup_logging(LoggingConfig(level="INFO", rules="coastercurve.export=debug"))

        assert applied == {"coastercurve.export": logging.DEBUG}
        assert logging.getLogger("coastercurve.export").level == logging.DEBUG

    def test_environment_overrides_level(self, monkeypatch):
        """Without explicit rules the environment replaces the level preset."""
        monkeypatch.setenv(RULES_ENV_VAR, "coastercurve.forces=error")

        applied = setup_logging(LoggingConfig(level="DEBUG"))

        assert applied == {"coastercurve.forces": logging.ERROR}
        assert logging.getLogger("coastercurve.forces").level == logging.ERROR

    def test_explicit_rules_override_environment(self, monkeypatch):
        """Rules given on the command line win over the environment."""
        monkeypatch.setenv(RULES_ENV_VAR, "coastercurve.export=off")

        applied = setup_logging(LoggingConfig(rules="coastercurve.export=DEBUG"))

        assert applied == {"coastercurve.export": logging.DEBUG}
        assert logging.getLogger("coastercurve.export").level == logging.DEBUG

    def test_log_file_header(self, tmp_path):
        """A new log file starts with a header and the start time."""
        path = tmp_path / "logs" / "coastercurve.log"

        setup_logging(LoggingConfig(log_file=str(path)))
        logging.getLogger("coastercurve.cli").info("hello")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "coastercurve log"
        assert lines[1].startswith("Started at ")
        assert any("hello" in line for line in lines[2:])

    def test_existing_log_file_appended(self, tmp_path):
        """An existing log file keeps its contents."""
        path = tmp_path / "coastercurve.log"
        path.write_text("earlier run\n", encoding="utf-8")

        setup_logging(LoggingConfig(log_file=path))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "earlier run"
        assert not any(line == "coastercurve log" for line in lines)
