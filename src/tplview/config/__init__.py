"""Configuration management for tplview."""

from .environment import EnvironmentSubstitutionError, substitute_environment_variables
from .loader import load_view_config, load_view_config_dict
from .models import ViewConfig

__all__ = [
    "ViewConfig",
    "load_view_config",
    "load_view_config_dict",
    "substitute_environment_variables",
    "EnvironmentSubstitutionError",
]
