"""Tests for config specs, overrides and merging."""

import pytest
from typer.testing import CliRunner

from migro.config import DEFAULT_CONFIG_FILE, get_config_from_spec, load_config
from migro.engine.block import BoundaryPolicy
from migro.engine.policy import EngineConfig, Mode
from migro.exceptions import ConfigError
from migro.run.apply import ApplyConfig
from migro.run.cli import app
from migro.run.scan import ScanConfig
from migro.utils.serialize import UNSET, recursive_merge


def test_default_config_validates():
    """Test that every section of the builtin default validates into its config class."""
    config = load_config()
    assert EngineConfig(**config["engine"]).blank_lines is BoundaryPolicy.SKIP
    apply_config = ApplyConfig(**config["apply"])
    assert apply_config.mode is Mode.INTERACTIVE
    assert apply_config.confirm_inserts is False
    assert "EXECUTION SUMMARY" in apply_config.summary_template
    assert ScanConfig(**config["scan"]).include == ["*.cs"]


def test_key_value_spec():
    """Test that dotted key=value overrides become nested dicts with YAML scalars."""
    assert get_config_from_spec("engine.blank_lines=terminate") == {"engine": {"blank_lines": "terminate"}}
    assert get_config_from_spec("apply.confirm_inserts=true") == {"apply": {"confirm_inserts": True}}
    assert get_config_from_spec("scan.placeholder=") == {"scan": {"placeholder": ""}}


def test_key_value_spec_keeps_attribute_text():
    """Test that bracketed attribute text is kept verbatim instead of parsed as YAML."""
    assert get_config_from_spec("scan.placeholder=[Authorize]") == {"scan": {"placeholder": "[Authorize]"}}
    assert get_config_from_spec("scan.placeholder=[Authorize") == {"scan": {"placeholder": "[Authorize"}}
    assert get_config_from_spec('scan.placeholder=[Authorize(Roles = "x")]') == {
        "scan": {"placeholder": '[Authorize(Roles = "x")]'}
    }
    assert ScanConfig(**load_config(["scan.placeholder=[Authorize]"])["scan"]).placeholder == "[Authorize]"


def test_key_value_spec_with_invalid_yaml():
    """Test that an unparsable override value raises ConfigError."""
    with pytest.raises(ConfigError):
        get_config_from_spec("scan.placeholder=a: b: c")


def test_cli_reports_invalid_override(tmp_path):
    """Test that the CLI exits with code 2 on an unparsable override instead of a traceback."""
    result = CliRunner().invoke(
        app, ["scan", str(tmp_path), "-c", "scan.placeholder=a: b: c", "--log-dir", str(tmp_path / "logs")]
    )
    assert result.exit_code == 2
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_file_spec_and_merge(tmp_path):
    """Test that a YAML file and a key=value override merge over the defaults."""
    path = tmp_path / "mine.yaml"
    path.write_text("scan:\n  placeholder: TBD\n")
    config = load_config([str(path), "scan.output=out.csv"])
    assert config["scan"]["placeholder"] == "TBD"
    assert config["scan"]["output"] == "out.csv"
    assert config["scan"]["include"] == ["*.cs"]


def test_builtin_name_resolves():
    """Test that a bare builtin config name resolves to the packaged file."""
    assert get_config_from_spec("default") == get_config_from_spec(DEFAULT_CONFIG_FILE)


def test_missing_config_file():
    """Test that an unknown config file raises ConfigError."""
    with pytest.raises(ConfigError):
        get_config_from_spec("does-not-exist.yaml")


def test_recursive_merge_skips_unset():
    """Test that recursive_merge merges nested dicts and drops UNSET values."""
    merged = recursive_merge({"a": {"b": 1, "c": 2}}, {"a": {"b": UNSET, "c": 3}, "d": UNSET}, None)
    assert merged == {"a": {"b": 1, "c": 3}}
