"""
config.py - Configuration management for ghwatch

This module handles loading, validating, and managing configuration for the ghwatch tool.
"""

import copy
import os
import re
from typing import Any, Dict, List, Optional, cast

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "check_untrusted_checkout": True,
    "check_script_injection": True,
    "check_imposter_commits": True,
    "untrusted_context_patterns": [],
    "fail_fast": False,
    "github": {
        "api_url": "https://api.github.com",
        "token_env": ["GITHUB_AUTH_TOKEN", "GITHUB_TOKEN"],
        "timeout": 30,
        "per_page": 100,
    },
    "report": {
        "verbose": False,
        "color_output": True,
    },
}

RULE_KEYS = ("check_untrusted_checkout", "check_script_injection", "check_imposter_commits")


class ConfigurationError(Exception):
    """Exception raised for configuration errors"""

    pass


def get_config_paths() -> List[str]:
    """
    Get list of possible config file locations in priority order

    Returns:
        List of config file paths to check
    """
    paths = []

    paths.append(os.path.join(os.getcwd(), "ghwatch.yml"))
    paths.append(os.path.join(os.getcwd(), "ghwatch.yaml"))
    paths.append(os.path.join(os.getcwd(), ".ghwatch.yml"))
    paths.append(os.path.join(os.getcwd(), ".ghwatch.yaml"))

    home_dir = os.path.expanduser("~")
    paths.append(os.path.join(home_dir, ".ghwatch.yml"))
    paths.append(os.path.join(home_dir, ".ghwatch.yaml"))
    paths.append(os.path.join(home_dir, ".config", "ghwatch", "config.yml"))
    paths.append(os.path.join(home_dir, ".config", "ghwatch", "config.yaml"))

    return paths


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two config dictionaries

    Args:
        base: Base configuration
        override: Configuration to override base

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, override_value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(override_value, dict):
            result[key] = merge_configs(result[key], override_value)
        else:
            result[key] = override_value

    return result


def _validate_patterns(config: Dict[str, Any]) -> None:
    """Validate extra untrusted context patterns"""

    if "untrusted_context_patterns" in config:
        patterns = config["untrusted_context_patterns"]
        if not isinstance(patterns, list):
            raise ConfigurationError("'untrusted_context_patterns' must be a list")

        for pattern in patterns:
            if not isinstance(pattern, str):
                raise ConfigurationError("'untrusted_context_patterns' entries must be strings")
            try:
                re.compile(pattern)
            except re.error as e:
                raise ConfigurationError(f"Invalid untrusted context pattern '{pattern}': {e}")


def _validate_github(config: Dict[str, Any]) -> None:
    """Validate GitHub client settings"""

    if "github" not in config:
        return

    github = config["github"]
    if not isinstance(github, dict):
        raise ConfigurationError("'github' must be a dictionary")

    for key in github:
        if key not in DEFAULT_CONFIG["github"]:
            raise ConfigurationError(f"Unknown configuration option 'github.{key}'")

    if "api_url" in github and not isinstance(github["api_url"], str):
        raise ConfigurationError("'github.api_url' must be a string")

    if "token_env" in github:
        token_env = github["token_env"]
        if not isinstance(token_env, list) or not all(isinstance(v, str) for v in token_env):
            raise ConfigurationError("'github.token_env' must be a list of strings")

    for key in ("timeout", "per_page"):
        if key in github:
            value = github[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(f"'github.{key}' must be a positive number")


def _validate_report(config: Dict[str, Any]) -> None:
    """Validate report settings"""

    if "report" in config:
        if not isinstance(config["report"], dict):
            raise ConfigurationError("'report' must be a dictionary")

        for key, value in config["report"].items():
            if not isinstance(value, bool):
                raise ConfigurationError(f"'report.{key}' must be a boolean")


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration structure and values"""

    for key in config.keys():
        if key not in DEFAULT_CONFIG:
            raise ConfigurationError(f"Unknown configuration option '{key}'")

    for key in RULE_KEYS + ("fail_fast",):
        if key in config and not isinstance(config[key], bool):
            raise ConfigurationError(f"'{key}' must be a boolean (true/false)")

    _validate_patterns(config)
    _validate_github(config)
    _validate_report(config)


def _read_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f)

    if user_config is None:
        return {}
    if not isinstance(user_config, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")

    validate_config(user_config)
    return user_config


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file or use defaults

    Args:
        config_path: Path to configuration file, or None to auto-detect

    Returns:
        Loaded configuration dictionary

    Raises:
        ConfigurationError: If configuration file is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            config = merge_configs(config, _read_config_file(config_path))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML configuration: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")
    else:
        for path in get_config_paths():
            if os.path.exists(path):
                try:
                    config = merge_configs(config, _read_config_file(path))
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Error parsing YAML configuration {path}: {e}")
                break

    return config


def save_config(config: Dict[str, Any], config_path: str) -> None:
    """
    Save configuration to file

    Args:
        config: Configuration dictionary to save
        config_path: Path to save configuration to

    Raises:
        ConfigurationError: If configuration cannot be saved
    """
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigurationError(f"Error saving configuration: {e}")


def generate_default_config(output_path: Optional[str] = None) -> str:
    """
    Generate default configuration YAML

    Args:
        output_path: Path to save default configuration to, or None to return as string

    Returns:
        Default configuration YAML

    Raises:
        ConfigurationError: If configuration cannot be saved
    """
    default_config_yaml = cast(
        str, yaml.safe_dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False)
    )

    if output_path:
        save_config(DEFAULT_CONFIG, output_path)

    return default_config_yaml


def disable_rules(config: Dict[str, Any], rules: List[str]) -> Dict[str, Any]:
    """
    Disable specific rules in a configuration

    Args:
        config: Configuration dictionary
        rules: Rule IDs or config keys to disable

    Returns:
        Updated configuration dictionary
    """
    updated_config = config.copy()

    for rule in rules:
        key = rule if rule.startswith("check_") else f"check_{rule}"
        if key in RULE_KEYS:
            updated_config[key] = False
        else:
            raise ConfigurationError(f"Unknown rule '{rule}'")

    return updated_config
