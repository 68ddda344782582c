"""Configuration loading and CLI overrides for runtime tunables.

Precedence, highest first: CLI flags, environment, YAML config file,
``Constants`` defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The configuration file exists but cannot be used."""


@dataclass
class RuntimeConfig:
    """Effective settings for one CLI run."""
    targets: List[str] = field(default_factory=list)
    modules: List[str] = field(default_factory=lambda: list(Constants.SCRIPT_MODULES))
    registry_url: str = Constants.REGISTRY_URL_NPM
    max_concurrency: int = Constants.MAX_CONCURRENCY


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML (or JSON, a YAML subset) config file.

    A missing file is ignored with a warning.

    Raises:
        ConfigError: if the file cannot be parsed or is not a mapping.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config {config_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")
    return data


def targets_from_env(environ=None) -> List[str]:
    """Split the VERSION environment variable on whitespace."""
    environ = os.environ if environ is None else environ
    raw = environ.get(Constants.ENV_TARGETS, "")
    return [token for token in raw.split() if token]


def build_runtime_config(args, environ=None) -> RuntimeConfig:
    """Merge defaults, config file, environment and CLI flags."""
    data = load_config_file(getattr(args, "CONFIG", None))
    config = RuntimeConfig()

    modules = data.get("modules")
    if isinstance(modules, list) and modules:
        config.modules = [str(m) for m in modules]
    if data.get("registry_url"):
        config.registry_url = str(data["registry_url"])
    if data.get("max_concurrency") is not None:
        try:
            config.max_concurrency = int(data["max_concurrency"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"max_concurrency must be an integer: {exc}") from exc
    if isinstance(data.get("targets"), list):
        config.targets = [str(t) for t in data["targets"]]

    env_targets = targets_from_env(environ)
    if env_targets:
        config.targets = env_targets

    if getattr(args, "TARGETS", None):
        config.targets = list(args.TARGETS)
    if getattr(args, "MODULES", None):
        config.modules = list(args.MODULES)
    if getattr(args, "REGISTRY_URL", None):
        config.registry_url = args.REGISTRY_URL
    if getattr(args, "MAX_CONCURRENCY", None) is not None:
        config.max_concurrency = int(args.MAX_CONCURRENCY)

    return config
