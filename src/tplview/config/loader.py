"""YAML configuration loader for tplview."""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from .environment import substitute_environment_variables
from .models import ViewConfig

logger = logging.getLogger(__name__)


def load_view_config(
    file_path: Union[str, Path],
    enable_env_substitution: bool = True,
    env_strict: bool = False,
) -> ViewConfig:
    """Load and validate a view configuration file.

    Relative entries in ``paths`` are resolved against the directory that
    holds the configuration file.

    Args:
        file_path: Path to the YAML configuration file
        enable_env_substitution: Whether to substitute environment variables
        env_strict: Whether environment variable substitution is strict

    Returns:
        Validated ViewConfig object

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or does not
            match the schema
    """
    path = Path(file_path)
    if not path.is_file():
        raise ConfigError(
            f"Configuration file not found: {path}. "
            f"Suggestion: Check the file path and ensure the file exists."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading configuration file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration in {path} must be a mapping, got {type(data).__name__}"
        )

    config = load_view_config_dict(
        data, enable_env_substitution=enable_env_substitution, env_strict=env_strict
    )
    base_dir = path.resolve().parent
    config.paths = [str(base_dir / p) for p in config.paths]
    logger.debug(f"Loaded view configuration from {path}")
    return config


def load_view_config_dict(
    data: Dict[str, Any],
    enable_env_substitution: bool = True,
    env_strict: bool = False,
) -> ViewConfig:
    """Validate an already-parsed configuration mapping.

    Raises:
        ConfigError: If the mapping does not match the schema
    """
    if enable_env_substitution:
        data = substitute_environment_variables(data, strict=env_strict)

    try:
        return ViewConfig.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid view configuration: {errors}") from e
