"""Config specs: YAML files or `dotted.key=value` overrides, merged left to right."""

from pathlib import Path
from typing import Any

import yaml

from migro import package_dir
from migro.exceptions import ConfigError
from migro.utils.serialize import recursive_merge

builtin_config_dir = package_dir / "config"
DEFAULT_CONFIG_FILE = builtin_config_dir / "default.yaml"


def _resolve_config_path(spec: str) -> Path:
    candidates = [Path(spec), builtin_config_dir / spec]
    if not spec.endswith((".yaml", ".yml")):
        candidates.append(builtin_config_dir / f"{spec}.yaml")
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    raise ConfigError(f"Config file not found: {spec!r} (also looked in {builtin_config_dir})")


def _parse_override_value(raw_value: str, spec: str) -> Any:
    # Attribute text such as `[Authorize]` would otherwise parse as a YAML list.
    if not raw_value or raw_value.startswith("["):
        return raw_value
    try:
        value = yaml.safe_load(raw_value)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid value in config override {spec!r}: {e}") from e
    if isinstance(value, (dict, list)):
        return raw_value
    return value


def _key_value_spec_to_dict(spec: str) -> dict[str, Any]:
    key, _, raw_value = spec.partition("=")
    keys = [k for k in key.strip().split(".") if k]
    if not keys:
        raise ConfigError(f"Invalid config override: {spec!r}")
    value: Any = _parse_override_value(raw_value.strip(), spec)
    for k in reversed(keys):
        value = {k: value}
    return value


def get_config_from_spec(spec: str | Path) -> dict[str, Any]:
    """Load a single config spec into a dict."""
    spec = str(spec)
    if "=" in spec and not Path(spec).is_file():
        return _key_value_spec_to_dict(spec)
    path = _resolve_config_path(spec)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not load config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_config(specs: list[str] | None = None, *extra: dict | None) -> dict[str, Any]:
    """Merge the default config, the given specs and any extra dicts (e.g. from CLI flags)."""
    configs = [get_config_from_spec(DEFAULT_CONFIG_FILE)]
    configs.extend(get_config_from_spec(spec) for spec in specs or [])
    return recursive_merge(*configs, *extra)
