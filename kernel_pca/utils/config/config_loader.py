"""Configuration loader for kernel PCA runs.

Supports both YAML and JSON configuration files with auto-detection based on
file extension. A configuration is grouped in sections::

    kernel:
      name: gaussian
      bandwidth: 0.5
    reduction:
      new_dimensionality: 2
      center: true
    nystroem:
      enabled: true
      rank: 32
      sampling: kmeans
      random_state: 42
    io:
      input_features: artifacts/features/features_numeric.csv
      output_root: artifacts/kpca
      standardise: true
      metadata_columns: [track_id]
    run:
      seed: 7
      overwrite: false
      log_level: INFO
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jsonschema
import yaml

from ...errors import ConfigurationError
from ...preprocessing.config import KernelPCAConfig
from .validator import ConfigValidator


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


_OPTIONAL_NUMBER = {"type": ["number", "null"]}

# JSON schema for kernel PCA run configuration validation
KPCA_CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "kernel": {
            "type": "object",
            "properties": {
                "name": {"type": ["string", "null"]},
                "bandwidth": {"type": ["number", "null"], "exclusiveMinimum": 0},
                "degree": _OPTIONAL_NUMBER,
                "offset": _OPTIONAL_NUMBER,
                "kernel_scale": _OPTIONAL_NUMBER,
            },
            "additionalProperties": False,
        },
        "reduction": {
            "type": "object",
            "properties": {
                "new_dimensionality": {"type": "integer", "minimum": 1},
                "center": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "nystroem": {
            "type": "object",
            "properties": {
                "enabled": {"type": "boolean"},
                "rank": {"type": ["integer", "null"], "minimum": 1},
                "sampling": {"type": "string"},
                "random_state": {"type": ["integer", "null"]},
                "params": {"type": "object"},
            },
            "additionalProperties": False,
        },
        "io": {
            "type": "object",
            "properties": {
                "input_features": {"type": "string"},
                "output_root": {"type": "string"},
                "standardise": {"type": "boolean"},
                "metadata_columns": {"type": "array", "items": {"type": "string"}},
            },
            "additionalProperties": False,
        },
        "run": {
            "type": "object",
            "properties": {
                "run_id": {"type": ["string", "null"]},
                "seed": {"type": "integer"},
                "overwrite": {"type": "boolean"},
                "log_level": {
                    "type": "string",
                    "enum": ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
                },
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


class ConfigLoader:
    """Utility class for loading and validating kernel PCA configuration.

    Supports both YAML (.yaml, .yml) and JSON (.json) configuration files.
    Auto-detects format based on file extension.
    """

    # Default values for configuration sections
    DEFAULTS = {
        "kernel": {
            "name": None,
            "bandwidth": None,
            "degree": None,
            "offset": None,
            "kernel_scale": None,
        },
        "reduction": {
            "new_dimensionality": 2,
            "center": False,
        },
        "nystroem": {
            "enabled": False,
            "rank": None,
            "sampling": "kmeans",
            "random_state": 42,
            "params": {},
        },
        "io": {
            "input_features": "artifacts/features/features_numeric.csv",
            "output_root": "artifacts/kpca",
            "standardise": True,
            "metadata_columns": [],
        },
        "run": {
            "run_id": None,
            "seed": 7,
            "overwrite": False,
            "log_level": "INFO",
        },
    }

    def __init__(self, config_path: Optional[Union[Path, str]] = None):
        """Initialize with an optional config path.

        Args:
            config_path: Path to config file. If None, only the defaults (plus
                any overrides given to :meth:`load`) are used.
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Dict[str, Any]] = None

    def _load_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from file, auto-detecting format."""
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        suffix = path.suffix.lower()

        with open(path, "r", encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                # Try YAML first, fall back to JSON
                content = f.read()
                try:
                    data = yaml.safe_load(content) or {}
                except yaml.YAMLError:
                    data = json.loads(content)
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {path} must contain a mapping at the top level."
            )
        return data

    def load(
        self, overrides: Optional[Dict[str, Any]] = None, validate: bool = True
    ) -> Dict[str, Any]:
        """Load configuration from file with optional validation.

        Args:
            overrides: Nested values applied on top of the file contents
            validate: Whether to validate against the schema and semantic rules

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If validation fails
        """
        raw_config = self._load_file(self.config_path) if self.config_path else {}
        config = _deep_merge(copy.deepcopy(self.DEFAULTS), raw_config)
        if overrides:
            config = _deep_merge(config, overrides)

        if validate:
            try:
                jsonschema.validate(config, KPCA_CONFIG_SCHEMA)
            except jsonschema.ValidationError as exc:
                location = ".".join(str(part) for part in exc.absolute_path) or "<root>"
                raise ConfigurationError(
                    f"Invalid configuration at '{location}': {exc.message}"
                ) from exc

            ConfigValidator.validate_and_log(config)

        self._config = config
        return copy.deepcopy(config)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key (e.g. 'kernel.name')."""
        config = self._config if self._config is not None else self.load()
        value: Any = config
        try:
            for part in key.split("."):
                value = value[part]
            return value
        except (KeyError, TypeError):
            return default


def config_to_kpca_config(config: Dict[str, Any]) -> KernelPCAConfig:
    """Build a :class:`KernelPCAConfig` from a validated configuration dictionary."""
    kernel = config["kernel"]
    reduction = config["reduction"]
    nystroem = config["nystroem"]
    io = config["io"]
    run = config["run"]
    return KernelPCAConfig(
        input_features=Path(io["input_features"]),
        output_root=Path(io["output_root"]),
        kernel=kernel["name"],
        new_dimensionality=reduction["new_dimensionality"],
        bandwidth=kernel["bandwidth"],
        degree=kernel["degree"],
        offset=kernel["offset"],
        kernel_scale=kernel["kernel_scale"],
        center=reduction["center"],
        nystroem_method=nystroem["enabled"],
        rank=nystroem["rank"],
        sampling=nystroem["sampling"],
        sampling_params=dict(nystroem["params"]),
        random_state=nystroem["random_state"],
        standardise=io["standardise"],
        metadata_columns=list(io["metadata_columns"]),
        run_id=run["run_id"],
        seed=run["seed"],
        overwrite=run["overwrite"],
        log_level=getattr(logging, run["log_level"]),
    )


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> KernelPCAConfig:
    """Load, validate and convert a configuration file into a ``KernelPCAConfig``.

    Args:
        config_path: Path to the configuration file (YAML or JSON), or None
            for defaults only
        overrides: Nested values taking precedence over the file

    Returns:
        KernelPCAConfig instance
    """
    loader = ConfigLoader(config_path)
    return config_to_kpca_config(loader.load(overrides=overrides))


__all__ = [
    "ConfigLoader",
    "KPCA_CONFIG_SCHEMA",
    "config_to_kpca_config",
    "load_config",
]
