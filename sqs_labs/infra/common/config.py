"""Centralized configuration loading."""
import os
import tomllib
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from sqs_labs.domain.entities.app_config import AppConfig
from sqs_labs.domain.entities.command_args import CommonArgs
from sqs_labs.infra.common.errors import (
    InvalidConfigError,
    MissingRootConfigError,
)


ENV_PREFIX = "APP"
ENV_SEPARATOR = "__"


def load_env_file(path: Optional[str] = None) -> None:
    """
    Load environment variables from a .env file if it exists.

    Variables already present in the process environment are kept,
    so real environment settings still win over the file.
    """
    if path is not None:
        if Path(path).exists():
            load_dotenv(path, override=False)
        return
    load_dotenv(find_dotenv(usecwd=True), override=False)


def read_config_file(path: str) -> dict[str, Any]:
    """
    Read a TOML or YAML config file into a dict.

    Format is chosen by extension; anything other than .yml/.yaml is
    parsed as TOML.

    Raises:
        InvalidConfigError: If the file cannot be read or parsed
    """
    suffix = Path(path).suffix.lower()
    try:
        if suffix in (".yml", ".yaml"):
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise InvalidConfigError(f"Invalid TOML in config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise InvalidConfigError(f"Invalid YAML in config file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidConfigError(f"Config file {path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise InvalidConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def env_overrides(
    environ: Mapping[str, str],
    prefix: str = ENV_PREFIX,
    separator: str = ENV_SEPARATOR,
) -> dict[str, Any]:
    """
    Turn prefixed environment variables into a nested dict.

    ``APP_RUNTIME__REGION=eu-west-1`` (or ``APP__RUNTIME__REGION``)
    becomes ``{"runtime": {"region": "eu-west-1"}}``. Keys are lower-cased.
    """
    result: dict[str, Any] = {}
    marker = f"{prefix}_".upper()
    for name, value in environ.items():
        if not name.upper().startswith(marker):
            continue
        key = name[len(marker):].lstrip("_")
        if not key:
            continue
        parts = [part.lower() for part in key.split(separator) if part]
        node = result
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
    return result


def overlay(base: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively apply ``layer`` over ``base``; layer wins per key."""
    merged = dict(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = overlay(current, value)
        else:
            merged[key] = value
    return merged


def _config_sources(
    root_path: str,
    lab_path: Optional[str],
    environ: Mapping[str, str],
    env_prefix: str,
    separator: str,
) -> Iterable[dict[str, Any]]:
    """Ordered sources, lowest precedence first."""
    if not Path(root_path).exists():
        raise MissingRootConfigError(
            f"Root config not found at '{root_path}'. "
            f"Create it (e.g. copy config.example.toml) or pass --config <path>."
        )
    yield read_config_file(root_path)

    if lab_path and Path(lab_path).is_file():
        yield read_config_file(lab_path)

    yield env_overrides(environ, prefix=env_prefix, separator=separator)


def load_merged_config(
    root_path: str,
    lab_path: Optional[str] = None,
    env_prefix: str = ENV_PREFIX,
    separator: str = ENV_SEPARATOR,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Load and merge root config, lab config and environment.

    Args:
        root_path: Path to the root config (required)
        lab_path: Path to the lab-scoped config (skipped if missing)
        env_prefix: Environment variable prefix
        separator: Nesting separator inside environment variable names
        environ: Environment mapping. If None, uses os.environ.

    Returns:
        Validated AppConfig

    Raises:
        MissingRootConfigError: If the root config file does not exist
        InvalidConfigError: If a file is malformed or the merge fails validation
    """
    if environ is None:
        environ = os.environ

    merged: dict[str, Any] = {}
    for source in _config_sources(root_path, lab_path, environ, env_prefix, separator):
        merged = overlay(merged, source)

    try:
        return AppConfig.model_validate(merged)
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid config: {e}") from e


def merged_config(
    common: CommonArgs,
    default_lab_config: str,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Merge root + lab + env for a command.

    Args:
        common: Common command-line flags
        default_lab_config: Lab config used when --lab-config is not given
        environ: Environment mapping. If None, uses os.environ.
    """
    lab_path = common.lab_config or default_lab_config
    return load_merged_config(common.config, lab_path, environ=environ)
