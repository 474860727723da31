import argparse
import copy
import json
from pathlib import Path
import sys
from typing import Any, Dict, List
from .config import DEFAULT_CONFIG, PROJECT_ROOT, REQUIRED_SCHEMA

def get_abs_path(usr_path_str: str, root_path: Path = PROJECT_ROOT) -> Path:
    user_path = Path(usr_path_str)

    if user_path.is_absolute():
        return user_path
    else:
        # If it's relative, assume it's relative to the project root.
        return root_path / user_path

class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or fails validation."""
    pass

# --- CONFIGURATION SCHEMA & VALIDATION ---

def validate_config_schema(config: Dict[str, Any], schema: Dict[str, Any] = REQUIRED_SCHEMA, path: str = "") -> List[str]:
    """
    Recursively validates a configuration dict against a schema using a generalized tuple format:
    (type1, type2, ..., required_value [optional])
    """
    errors: List[str] = []
    for key, expected in schema.items():
        current_path = f"{path}.{key}" if path else key

        if key not in config:
            errors.append(f"Schema Error: Missing required key '{current_path}'")
            continue

        actual_value = config[key]

        if isinstance(expected, tuple):
            allowed_types = list(expected)
            required_value = None
            has_required_value = False

            # The last element is a required value when it is not a type
            if expected and not isinstance(expected[-1], type):
                required_value = allowed_types.pop()
                has_required_value = True

            if type(actual_value) not in allowed_types:
                type_names = ", ".join(t.__name__ for t in allowed_types)
                errors.append(f"Schema Error: Key '{current_path}' has wrong type. "
                              f"Expected one of ({type_names}), but got {type(actual_value).__name__}.")
                continue

            if has_required_value and actual_value != required_value:
                errors.append(f"Schema Error: Key '{current_path}' has wrong value. "
                              f"Expected '{required_value}', but got '{actual_value}'.")

        elif isinstance(expected, type):
            if not isinstance(actual_value, expected):
                errors.append(f"Schema Error: Key '{current_path}' has wrong type. "
                              f"Expected {expected.__name__}, but got {type(actual_value).__name__}.")
        elif isinstance(expected, dict):
            if not isinstance(actual_value, dict):
                 errors.append(f"Schema Error: Key '{current_path}' should be a dictionary, "
                               f"but got {type(actual_value).__name__}.")
            else:
                nested_errors = validate_config_schema(actual_value, expected, path=current_path)
                errors.extend(nested_errors)
    return errors

# --- CONFIGURATION LOADING & MERGING ---

def deep_merge(source: dict, destination: dict) -> dict:
    """
    Recursively merges a source dictionary into a destination dictionary.
    """
    for key, value in source.items():
        if isinstance(value, dict) and key in destination and isinstance(destination[key], dict):
            destination[key] = deep_merge(value, destination[key])
        else:
            destination[key] = value
    return destination


def _parse_cli_value(value: Any) -> Any:
    """
    Parses a string from the CLI into a Python type.
    Handles None, bool, int, float, lists, and falls back to string.
    """
    if not isinstance(value, str):
        return value

    stripped_val = value.strip()

    if (stripped_val.startswith('[') and stripped_val.endswith(']')) or \
       (stripped_val.startswith('(') and stripped_val.endswith(')')):
        inner_val = stripped_val[1:-1]
    else:
        inner_val = stripped_val

    if ',' in inner_val:
        return [_parse_cli_value(item) for item in inner_val.split(',')]

    val_lower = inner_val.lower()
    if val_lower in ['none', 'null']:
        return None
    if val_lower == 'true':
        return True
    if val_lower == 'false':
        return False
    if inner_val.isdigit():
        return int(inner_val)
    try:
        return float(inner_val)
    except ValueError:
        return inner_val


def set_nested_value(d: dict, key_path: str, value: str):
    """
    Sets a value in a nested dictionary using a dot-separated key path.
    The input `value` is a string from the command line and is parsed first.
    """
    keys = key_path.split('.')
    for key in keys[:-1]:
        d = d.setdefault(key, {})

    d[keys[-1]] = _parse_cli_value(value)


def parse_cli_args(argv: list[str] | None = None):
    """Defines and parses command-line arguments."""
    parser = argparse.ArgumentParser(description="Entropy-driven Wordle solver simulation")
    parser.add_argument("-i", "--implementation", help="Name of the guesser implementation to use.")
    parser.add_argument("-m", "--max", type=int, help="Maximum number of games to play.")
    parser.add_argument("-t", "--threads", type=int, help="Number of games to play concurrently.")
    parser.add_argument("-c", "--config", type=Path, help="Path to a custom configuration JSON file.")
    parser.add_argument('--set', nargs=2, action='append', metavar=('KEY', 'VALUE'), help="Override a config value using dot notation.")
    parser.add_argument("--precompute", action="store_true", help="Fill and save the full pattern cache before playing.")
    parser.add_argument("--calibrate", action="store_true", help="Refit the expected-score estimator instead of benchmarking.")
    return parser.parse_args(argv)


def load_config(argv: list[str] | None = None) -> dict:
    """
    Loads, merges, and validates configuration from the defaults, an optional
    JSON file and command line overrides.
    Raises ConfigError if loading or validation fails.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)

    args = parse_cli_args(argv)

    if args.config:
        config = get_abs_path(args.config)
        if config.exists():
            try:
                with open(config) as f:
                    custom_data = json.load(f)
                final_config = deep_merge(source=custom_data, destination=final_config)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Error parsing custom config file at '{config}': {e}")
        else:
            # This is a warning, not a fatal error.
            print(f"Warning: Custom config file not found at {config}", file=sys.stderr)

    if args.set:
        for key, value in args.set:
            set_nested_value(final_config, key, value)

    if args.implementation is not None:
        final_config['simulation']['implementation'] = args.implementation
    if args.max is not None:
        final_config['simulation']['max_games'] = args.max
    if args.threads is not None:
        final_config['simulation']['nthreads'] = args.threads

    validation_errors = validate_config_schema(final_config)
    if validation_errors:
        header = "Configuration validation failed with the following errors:"
        full_error_message = "\n".join([header] + [f"  - {e}" for e in validation_errors])
        raise ConfigError(full_error_message)

    return final_config
