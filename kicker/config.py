"""
Kicker configuration.

A config file is YAML with camelCase keys:

    kubeConf: /path/to/kubeconfig     # optional
    checkInterval: 60                 # seconds between cycles
    criteria:
      - name: worker                  # pod name prefix (required)
        namespace: default
        strategy: spread              # "spread" or "immediate"
        maxAge: 86400                 # seconds
        minAge: 90                    # seconds, must be below maxAge
        limit: 1                      # kicks per cycle
        gracePeriod: 30               # seconds
        coolDown: 300                 # seconds

Unset or non-positive numbers fall back to the defaults below.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from kicker.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

STRATEGY_SPREAD = "spread"
STRATEGY_IMMEDIATE = "immediate"

DEFAULT_CONFIG_FILE_NAME = "kicker.yaml"
CONFIG_PATH_ENV = "KICKER_CONFIG"

DEFAULT_CHECK_INTERVAL = 60
DEFAULT_NAMESPACE = "default"
DEFAULT_MAX_AGE = 86400
DEFAULT_MIN_AGE = 90
DEFAULT_STRATEGY = STRATEGY_SPREAD
DEFAULT_LIMIT = 1
DEFAULT_GRACE_PERIOD = 30
DEFAULT_COOL_DOWN = 300


def _positive_or(value: Any, default: int, key: str) -> int:
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    return number if number > 0 else default


@dataclass
class Criteria:
    """One targeting policy: which pods to consider and how to kick them."""
    name: str = ""
    namespace: str = ""
    strategy: str = ""
    max_age: int = 0
    min_age: int = 0
    limit: int = 0
    grace_period: int = 0
    cool_down: int = 0

    def validate(self) -> "Criteria":
        """Fill defaults in place and check invariants. Returns self."""
        if not self.name:
            raise ConfigurationError("Criteria must have a name")

        self.namespace = self.namespace or DEFAULT_NAMESPACE
        self.strategy = self.strategy or DEFAULT_STRATEGY
        self.max_age = _positive_or(self.max_age, DEFAULT_MAX_AGE, "maxAge")
        self.min_age = _positive_or(self.min_age, DEFAULT_MIN_AGE, "minAge")
        self.limit = _positive_or(self.limit, DEFAULT_LIMIT, "limit")
        self.grace_period = _positive_or(self.grace_period, DEFAULT_GRACE_PERIOD, "gracePeriod")
        self.cool_down = _positive_or(self.cool_down, DEFAULT_COOL_DOWN, "coolDown")

        if self.max_age <= self.min_age:
            raise ConfigurationError(
                f"Criteria '{self.name}': maxAge {self.max_age}s must be greater than "
                f"minAge {self.min_age}s"
            )
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Criteria":
        if not isinstance(data, dict):
            raise ConfigurationError(f"Each criteria must be a mapping, got {type(data).__name__}")
        return cls(
            name=str(data.get("name") or ""),
            namespace=str(data.get("namespace") or ""),
            strategy=str(data.get("strategy") or ""),
            max_age=data.get("maxAge", 0),
            min_age=data.get("minAge", 0),
            limit=data.get("limit", 0),
            grace_period=data.get("gracePeriod", 0),
            cool_down=data.get("coolDown", 0),
        )


@dataclass
class KickerConfig:
    """Top-level configuration: cluster access, cycle interval and criteria."""
    kube_config: Optional[str] = None
    check_interval: int = DEFAULT_CHECK_INTERVAL
    criteria: List[Criteria] = field(default_factory=list)

    def validate(self) -> "KickerConfig":
        self.check_interval = _positive_or(
            self.check_interval, DEFAULT_CHECK_INTERVAL, "checkInterval"
        )
        if not self.criteria:
            raise ConfigurationError("Must provide at least one criteria in config")
        for criteria in self.criteria:
            criteria.validate()
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KickerConfig":
        criteria = data.get("criteria") or []
        if not isinstance(criteria, list):
            raise ConfigurationError("criteria must be a list")
        return cls(
            kube_config=data.get("kubeConf") or None,
            check_interval=data.get("checkInterval", 0),
            criteria=[Criteria.from_dict(item) for item in criteria],
        )


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Explicit path, else $KICKER_CONFIG, else ./kicker.yaml."""
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return Path(".") / DEFAULT_CONFIG_FILE_NAME


def load_config(path: Optional[Union[str, Path]] = None) -> KickerConfig:
    """
    Load and validate the config file.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    config_path = resolve_config_path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"error loading config file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"error parsing config file '{config_path}': {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"config file '{config_path}' must contain a mapping")

    try:
        config = KickerConfig.from_dict(payload).validate()
    except ConfigurationError as e:
        raise ConfigurationError(f"error parsing config file '{config_path}': {e}") from e

    logger.info(
        f"Loaded config from {config_path}: {len(config.criteria)} criteria, "
        f"check_interval={config.check_interval}s"
    )
    return config
