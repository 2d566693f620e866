#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management for hostsweep (config.toml) and RunContext construction.
"""

from __future__ import annotations
import copy
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

# TOML support (tomllib for Python 3.11+, tomli for <3.11)
try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore

from hostsweep.constants import CATEGORIES, DEFAULT_LOG_DIR
from hostsweep.errors import ConfigError
from hostsweep.logging_setup import logger
from hostsweep.models import DockerPrunePolicy, JournalRetention, RetentionMode, RunContext


def config_dir() -> Path:
    return Path("~/.config/hostsweep").expanduser()


def config_file_path() -> Path:
    return config_dir() / "config.toml"


def default_config() -> Dict[str, Any]:
    """Return default configuration."""
    return {
        "clean": {
            "auto_confirm": False,
            "allow_irreversible": False,
        },
        "categories": {name: True for name in CATEGORIES},
        "journal": {
            "vacuum_size": "100M",
            "vacuum_time": "2weeks",
        },
        "tmp": {
            "tmp_days": 1,
            "var_tmp_days": 7,
        },
        "docker": {
            "policy": DockerPrunePolicy.DANGLING_IMAGES_ONLY.value,
        },
        "logging": {
            "log_dir": DEFAULT_LOG_DIR,
        },
    }


CONFIG_SECTIONS = ("clean", "categories", "journal", "tmp", "docker", "logging")


def check_sections(config: Dict[str, Any]) -> None:
    """Raise ConfigError unless every known section is a table."""
    for section in CONFIG_SECTIONS:
        if section in config and not isinstance(config[section], dict):
            raise ConfigError(f"[{section}] must be a table")


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay ``override`` onto ``base`` one section deep."""
    out = copy.deepcopy(base)
    for section, values in override.items():
        if isinstance(values, dict) and isinstance(out.get(section), dict):
            out[section].update(values)
        else:
            out[section] = values
    return out


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from config.toml merged over the defaults."""
    config_path = Path(path) if path else config_file_path()

    if not config_path.exists():
        logger.debug("Config file not found, using defaults")
        return default_config()

    try:
        with open(config_path, "rb") as f:
            config = tomllib.load(f)
        logger.debug(f"Loaded config from {config_path}")
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Error loading config {config_path}: {e}") from e
    merged = merge_config(default_config(), config)
    check_sections(merged)
    return merged


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    raise ConfigError(f"Cannot write {type(value).__name__} to TOML")


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> Path:
    """Save configuration to config.toml. Returns the path written."""
    config_path = Path(path) if path else config_file_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    lines = []
    for section, values in config.items():
        lines.append(f"[{section}]")
        for key, value in values.items():
            lines.append(f"{key} = {_toml_value(value)}")
        lines.append("")  # Empty line between sections

    config_path.write_text("\n".join(lines), encoding="utf-8")
    logger.info(f"Saved config to {config_path}")
    return config_path


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return value


def parse_docker_policy(value: str) -> DockerPrunePolicy:
    try:
        return DockerPrunePolicy(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in DockerPrunePolicy)
        raise ConfigError(f"Unknown Docker prune policy {value!r} (choose from {choices})") from None


def build_run_context(
    config: Dict[str, Any],
    yes: bool = False,
    dry_run: bool = False,
    allow_irreversible: bool = False,
    docker_policy: Optional[str] = None,
    journal_size: Optional[str] = None,
    journal_time: Optional[str] = None,
    no_journal: bool = False,
    skip: Iterable[str] = (),
    log_dir: Optional[str] = None,
) -> RunContext:
    """
    Build the RunContext for a run. Command-line values win over the config file.

    Journal flags given on the command line replace both configured retention
    values; size still wins when both flags are given.
    """
    check_sections(config)
    clean = config.get("clean", {})
    categories_cfg = config.get("categories", {})
    journal = config.get("journal", {})
    tmp = config.get("tmp", {})

    skip = set(skip)
    unknown = (skip | set(categories_cfg)) - set(CATEGORIES)
    if unknown:
        raise ConfigError(f"Unknown categories: {', '.join(sorted(unknown))}")
    categories = frozenset(
        name for name in CATEGORIES if categories_cfg.get(name, True) and name not in skip
    )

    if no_journal:
        retention = JournalRetention(RetentionMode.NONE)
    elif journal_size or journal_time:
        retention = JournalRetention.from_settings(journal_size, journal_time)
    else:
        retention = JournalRetention.from_settings(journal.get("vacuum_size"), journal.get("vacuum_time"))

    policy = parse_docker_policy(docker_policy or config.get("docker", {}).get("policy", "dangling"))

    return RunContext(
        auto_confirm=bool(yes or clean.get("auto_confirm", False)),
        allow_irreversible=bool(allow_irreversible or clean.get("allow_irreversible", False)),
        journal_retention=retention,
        docker_policy=policy,
        categories=categories,
        tmp_max_age_days=_positive_int(tmp.get("tmp_days", 1), "tmp.tmp_days"),
        var_tmp_max_age_days=_positive_int(tmp.get("var_tmp_days", 7), "tmp.var_tmp_days"),
        log_dir=log_dir or config.get("logging", {}).get("log_dir", DEFAULT_LOG_DIR),
        dry_run=dry_run,
    )
