"""
Logging configuration for coastercurve.

Provides:
- Level presets expanded to per-logger rules for the package loggers
- Rule strings ("coastercurve.export=DEBUG;coastercurve.forces=off"), from
  the configuration or the COASTERCURVE_LOG_RULES environment variable
- Console plus optional rotating log file with a start header
"""

from dataclasses import dataclass
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional
import logging
import os
import sys


LOG_FORMAT = "%(asctime)s [pid:%(process)d tid:%(thread)x] [%(levelname)s] (%(name)s) %(message)s"

# Used when no rules are configured explicitly
RULES_ENV_VAR = "COASTERCURVE_LOG_RULES"

CATEGORIES = (
    "coastercurve.track",
    "coastercurve.export",
    "coastercurve.forces",
    "coastercurve.cli",
)

# "off" sits above CRITICAL so nothing passes
OFF = logging.CRITICAL + 10

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "off": OFF,
}


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_file: Optional[Path] = None
    rules: Optional[str] = None

    # Rotation
    max_bytes: int = 512 * 1024
    backup_count: int = 1

    def __post_init__(self):
        if self.log_file and isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)


def rules_for_level(level: str) -> Dict[str, int]:
    """Expand a level preset to a rule for every package category.

    Args:
        level: One of debug, info, warning, error, critical, off

    Returns:
        Mapping of logger name to level; empty for unknown presets
    """
    value = _LEVELS.get(level.strip().lower()) if level else None
    if value is None:
        return {}
    return {category: value for category in CATEGORIES}


def parse_rules(text: str) -> Dict[str, int]:
    """Parse a rule string.

    Rules are ``name=level`` pairs separated by ``;``, ``,`` or newlines.
    Entries with an unknown level are skipped.

    Args:
        text: Rule string

    Returns:
        Mapping of logger name to level
    """
    rules: Dict[str, int] = {}
    for entry in text.replace(",", ";").replace("\n", ";").split(";"):
        if "=" not in entry:
            continue
        name, _, level = entry.partition("=")
        value = _LEVELS.get(level.strip().lower())
        if name.strip() and value is not None:
            rules[name.strip()] = value
    return rules


def _open_log_file(config: LoggingConfig) -> logging.Handler:
    path = config.log_file
    path.parent.mkdir(parents=True, exist_ok=True)

    if not path.exists():
        with open(path, "w", encoding="utf-8") as f:
            f.write("coastercurve log\n")
            f.write(f"Started at {datetime.now().isoformat(timespec='milliseconds')}\n")

    return RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )


def setup_logging(config: LoggingConfig | None = None) -> Dict[str, int]:
    """Configure the root logger and the package categories.

    Args:
        config: Logging configuration

    Returns:
        The per-logger rules that were applied
    """
    config = config or LoggingConfig()

    handlers = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        handlers.append(_open_log_file(config))

    logging.basicConfig(
        level=_LEVELS.get(config.level.lower(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Explicit rules win over the environment, which wins over the preset
    env_rules = os.environ.get(RULES_ENV_VAR)
    if config.rules:
        rules = parse_rules(config.rules)
    elif env_rules:
        rules = parse_rules(env_rules)
    else:
        rules = rules_for_level(config.level)

    for name, level in rules.items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).info(
        "Logging initialized%s", f" at {config.log_file}" if config.log_file else ""
    )
    return rules
