"""
Run configuration YAML.

Keys mirror FitConfig fields, e.g.::

    grid: C1C1
    composition: hino
    input_dir: Inputs
    output_dir: results
    save_plot: false
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from xsecfit.errors import ConfigurationError
from xsecfit.types.config import FitConfig

logger = logging.getLogger(__name__)


def load_fit_config(
    file_path: Path | None = None, overrides: dict[str, Any] | None = None
) -> FitConfig:
    """Build a FitConfig from defaults, an optional YAML file and overrides.

    Overrides whose value is None are ignored so unset CLI options keep the
    file (or default) value.
    """
    values: dict[str, Any] = {}

    if file_path is not None:
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigurationError(f"Config file not found: {file_path}")
        try:
            with file_path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Failed to load config {file_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {file_path} must hold a mapping")
        values.update(data)
        logger.debug("Loaded %d config values from %s", len(data), file_path)

    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(values) - FitConfig.field_names()
    if unknown:
        raise ConfigurationError(
            f"Unknown config keys: {', '.join(sorted(unknown))}"
        )
    try:
        return FitConfig(**values)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
