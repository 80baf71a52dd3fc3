"""Environment variable substitution for htmlexport configurations."""

import os
import re
from typing import Any, Collection, Union

from ..errors import ConfigurationError


class EnvironmentSubstitutionError(ConfigurationError):
    """Exception raised when environment variable substitution fails."""

    pass


def substitute_environment_variables(
    value: Any,
    strict: bool = False,
    reserved: Collection[str] = (),
) -> Any:
    """Substitute environment variables in configuration values.

    Supports the following formats:
    - ${VAR} - Required variable, left unchanged when unset unless strict
    - ${VAR:default} - Optional variable with default value
    - ${VAR:-default} - Optional variable with default (bash-style)
    - ${VAR:?error_message} - Required with custom error message

    Placeholders that are not plain identifiers (``${entity.idString}``) and
    names listed in ``reserved`` (``${cache}``) are never touched; they are
    expanded later against path and entity bindings.

    Args:
        value: Value to process (can be string, dict, list, or primitive)
        strict: If True, all variables must be defined (no defaults allowed)
        reserved: Placeholder names that belong to later expansion stages

    Returns:
        Value with environment variables substituted

    Raises:
        EnvironmentSubstitutionError: If required variables are missing
    """
    if isinstance(value, str):
        return _substitute_in_string(value, strict, reserved)
    elif isinstance(value, dict):
        return {
            k: substitute_environment_variables(v, strict, reserved)
            for k, v in value.items()
        }
    elif isinstance(value, list):
        return [
            substitute_environment_variables(item, strict, reserved) for item in value
        ]
    else:
        # Primitive types (int, float, bool, None) - return as-is
        return value


def _substitute_in_string(
    text: str, strict: bool, reserved: Collection[str]
) -> Union[str, int, float, bool]:
    """Substitute environment variables in a string value."""
    if "${" not in text:
        return text

    # Pattern to match ${VAR}, ${VAR:default}, ${VAR:-default}, ${VAR:?message}
    pattern = r"\$\{([A-Za-z_][A-Za-z0-9_]*)([:?-].*?)?\}"
    substituted = False

    def replace_var(match: Any) -> str:
        nonlocal substituted
        var_name = match.group(1)
        modifier = match.group(2)

        if var_name in reserved:
            return str(match.group(0))

        env_value = os.environ.get(var_name)
        if env_value is not None:
            substituted = True
            return env_value

        if modifier is None:
            if strict:
                raise EnvironmentSubstitutionError(
                    f"Required environment variable '{var_name}' is not set. "
                    f"Suggestion: Set the variable with 'export {var_name}=value'"
                )
            # In non-strict mode, leave unchanged for later expansion
            return str(match.group(0))

        elif modifier.startswith(":?"):
            error_msg = modifier[2:] or f"Variable {var_name} is required"
            raise EnvironmentSubstitutionError(
                f"Environment variable substitution failed: {error_msg}. "
                f"Suggestion: Set the variable with 'export {var_name}=value'"
            )

        elif modifier.startswith(":"):
            if strict:
                raise EnvironmentSubstitutionError(
                    f"Environment variable '{var_name}' is not set and strict mode "
                    f"is enabled. Suggestion: Set the variable with 'export "
                    f"{var_name}=value'"
                )
            substituted = True
            return modifier[2:] if modifier.startswith(":-") else modifier[1:]

        else:
            raise EnvironmentSubstitutionError(
                f"Invalid environment variable syntax: {match.group(0)}. "
                "Supported formats: ${VAR}, ${VAR:default}, ${VAR:-default}, "
                "${VAR:?message}"
            )

    result = re.sub(pattern, replace_var, text)
    # Apply type coercion if the entire string was a single variable
    if substituted and re.fullmatch(pattern, text):
        return _coerce_type(result)
    return result


def _coerce_type(value: str) -> Union[str, int, float, bool]:
    """Coerce string value to appropriate type."""
    if value.lower() in ("true", "yes", "on"):
        return True
    elif value.lower() in ("false", "no", "off"):
        return False

    try:
        if "." not in value and "e" not in value.lower():
            return int(value)
        else:
            return float(value)
    except ValueError:
        pass

    return value
