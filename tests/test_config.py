# -*- coding: utf-8 -*-
"""Tests for configuration loading and RunContext construction."""

import pytest

from hostsweep import config as config_module
from hostsweep.constants import CATEGORIES
from hostsweep.errors import ConfigError
from hostsweep.models import DockerPrunePolicy, RetentionMode


def test_defaults_when_file_missing(tmp_path):
    cfg = config_module.load_config(tmp_path / "missing.toml")
    assert cfg == config_module.default_config()


def test_load_merges_over_defaults(temp_config_dir):
    path = temp_config_dir / "config.toml"
    path.write_text(
        '[docker]\npolicy = "unused"\n\n[categories]\nsnap = false\n',
        encoding="utf-8",
    )
    cfg = config_module.load_config(path)
    assert cfg["docker"]["policy"] == "unused"
    assert cfg["categories"]["snap"] is False
    assert cfg["categories"]["apt"] is True
    assert cfg["journal"]["vacuum_size"] == "100M"


def test_invalid_toml_raises(temp_config_dir):
    path = temp_config_dir / "config.toml"
    path.write_text("[docker\npolicy = ", encoding="utf-8")
    with pytest.raises(ConfigError):
        config_module.load_config(path)


def test_save_then_load(temp_config_dir):
    path = temp_config_dir / "config.toml"
    cfg = config_module.default_config()
    cfg["clean"]["auto_confirm"] = True
    cfg["logging"]["log_dir"] = "/srv/logs"
    config_module.save_config(cfg, path)
    assert config_module.load_config(path) == cfg


def test_default_run_context():
    ctx = config_module.build_run_context(config_module.default_config())
    assert ctx.auto_confirm is False
    assert ctx.allow_irreversible is False
    assert ctx.docker_policy is DockerPrunePolicy.DANGLING_IMAGES_ONLY
    assert ctx.journal_retention.mode is RetentionMode.BY_SIZE
    assert ctx.journal_retention.value == "100M"
    assert ctx.categories == frozenset(CATEGORIES)
    assert (ctx.tmp_max_age_days, ctx.var_tmp_max_age_days) == (1, 7)


def test_command_line_overrides():
    ctx = config_module.build_run_context(
        config_module.default_config(),
        yes=True,
        docker_policy="full",
        journal_time="3d",
        skip=["snap", "kernels"],
        log_dir="/tmp/hs-logs",
    )
    assert ctx.auto_confirm is True
    assert ctx.docker_policy is DockerPrunePolicy.FULL_SYSTEM_PRUNE
    assert ctx.journal_retention.mode is RetentionMode.BY_AGE
    assert ctx.journal_retention.value == "3d"
    assert "snap" not in ctx.categories and "kernels" not in ctx.categories
    assert ctx.log_dir == "/tmp/hs-logs"


def test_size_wins_when_both_given():
    ctx = config_module.build_run_context(config_module.default_config(),
                                          journal_size="200M", journal_time="3d")
    assert ctx.journal_retention.mode is RetentionMode.BY_SIZE
    assert ctx.journal_retention.value == "200M"


def test_no_journal():
    ctx = config_module.build_run_context(config_module.default_config(), no_journal=True)
    assert ctx.journal_retention.mode is RetentionMode.NONE


def test_unknown_docker_policy():
    cfg = config_module.default_config()
    cfg["docker"]["policy"] = "everything"
    with pytest.raises(ConfigError):
        config_module.build_run_context(cfg)


def test_unknown_category():
    cfg = config_module.default_config()
    cfg["categories"]["flatpak"] = True
    with pytest.raises(ConfigError):
        config_module.build_run_context(cfg)


def test_bad_tmp_threshold():
    cfg = config_module.default_config()
    cfg["tmp"]["tmp_days"] = 0
    with pytest.raises(ConfigError):
        config_module.build_run_context(cfg)


def test_section_must_be_a_table(temp_config_dir):
    path = temp_config_dir / "config.toml"
    path.write_text("clean = true\n", encoding="utf-8")
    with pytest.raises(ConfigError, match=r"\[clean\] must be a table"):
        config_module.load_config(path)


@pytest.mark.parametrize("section", ["clean", "categories", "journal", "tmp", "docker", "logging"])
def test_build_run_context_rejects_scalar_section(section):
    cfg = config_module.default_config()
    cfg[section] = "oops"
    with pytest.raises(ConfigError, match="must be a table"):
        config_module.build_run_context(cfg)
