"""Environment variable substitution for view configuration files."""

import os
import re
from typing import Any, Union

from ..exceptions import ConfigError

# ${VAR}, ${VAR:default}, ${VAR:-default}, ${VAR:?message}
_VARIABLE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)((?::\?|:-|:)[^}]*)?\}")


class EnvironmentSubstitutionError(ConfigError):
    """Exception raised when environment variable substitution fails."""

    pass


def substitute_environment_variables(value: Any, strict: bool = False) -> Any:
    """Substitute environment variables in configuration values.

    Dicts and lists are walked recursively; other non-string values are
    returned as-is. A string consisting of a single reference is coerced to
    bool, int or float when the substituted text looks like one.

    Args:
        value: Value to process
        strict: If True, unset variables are errors even when a default is given

    Returns:
        Value with environment variables substituted

    Raises:
        EnvironmentSubstitutionError: If a required variable is missing
    """
    if isinstance(value, str):
        return _substitute_in_string(value, strict)
    if isinstance(value, dict):
        return {k: substitute_environment_variables(v, strict) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_environment_variables(item, strict) for item in value]
    return value


def _substitute_in_string(text: str, strict: bool) -> Union[str, int, float, bool]:
    if "${" not in text:
        return text

    def replace_var(match: "re.Match[str]") -> str:
        var_name, modifier = match.group(1), match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value

        if modifier is None:
            if strict:
                raise EnvironmentSubstitutionError(
                    f"Required environment variable '{var_name}' is not set. "
                    f"Suggestion: Set the variable with 'export {var_name}=value'"
                )
            return match.group(0)

        if modifier.startswith(":?"):
            error_msg = modifier[2:] or f"Variable {var_name} is required"
            raise EnvironmentSubstitutionError(
                f"Environment variable substitution failed: {error_msg}. "
                f"Suggestion: Set the variable with 'export {var_name}=value'"
            )

        if strict:
            raise EnvironmentSubstitutionError(
                f"Environment variable '{var_name}' is not set and strict mode "
                f"is enabled. Suggestion: Set the variable with 'export "
                f"{var_name}=value'"
            )
        return modifier[2:] if modifier.startswith(":-") else modifier[1:]

    result = _VARIABLE.sub(replace_var, text)
    if result != text and _VARIABLE.fullmatch(text):
        return _coerce_type(result)
    return result


def _coerce_type(value: str) -> Union[str, int, float, bool]:
    """Coerce string value to appropriate type."""
    lowered = value.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False

    try:
        if "." not in value and "e" not in lowered:
            return int(value)
        return float(value)
    except ValueError:
        return value
