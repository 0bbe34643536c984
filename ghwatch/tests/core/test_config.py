"""
test_config.py - Tests for the configuration module
"""

import os

import pytest
import yaml

from ghwatch.core.config import (
    DEFAULT_CONFIG,
    ConfigurationError,
    disable_rules,
    generate_default_config,
    get_config_paths,
    load_config,
    merge_configs,
    save_config,
    validate_config,
)


@pytest.fixture
def isolated_cwd(temp_dir, monkeypatch):
    """Run with an empty working directory and home so no config is auto-detected."""
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("HOME", temp_dir)
    return temp_dir


def test_default_config():
    """Test that DEFAULT_CONFIG contains expected keys."""
    assert DEFAULT_CONFIG["check_untrusted_checkout"] is True
    assert DEFAULT_CONFIG["check_script_injection"] is True
    assert DEFAULT_CONFIG["check_imposter_commits"] is True
    assert DEFAULT_CONFIG["untrusted_context_patterns"] == []
    assert DEFAULT_CONFIG["fail_fast"] is False
    assert "api_url" in DEFAULT_CONFIG["github"]


def test_load_config_default(isolated_cwd):
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_load_config_with_path(temp_dir):
    config_path = os.path.join(temp_dir, "ghwatch.yml")
    with open(config_path, "w") as f:
        yaml.dump(
            {
                "check_imposter_commits": False,
                "untrusted_context_patterns": [r"discussion\.title"],
                "github": {"timeout": 5},
            },
            f,
        )

    config = load_config(config_path)

    assert config["check_imposter_commits"] is False
    assert config["untrusted_context_patterns"] == [r"discussion\.title"]
    assert config["github"]["timeout"] == 5
    # untouched nested keys keep their defaults
    assert config["github"]["per_page"] == 100


def test_load_config_autodetect(isolated_cwd):
    with open(os.path.join(isolated_cwd, ".ghwatch.yml"), "w") as f:
        f.write("fail_fast: true\n")

    assert load_config()["fail_fast"] is True


def test_load_config_nonexistent():
    with pytest.raises(ConfigurationError):
        load_config("/path/to/nonexistent/config.yml")


def test_load_config_invalid_yaml(temp_dir):
    config_path = os.path.join(temp_dir, "invalid.yml")
    with open(config_path, "w") as f:
        f.write("This is not valid YAML: [unclosed bracket")

    with pytest.raises(ConfigurationError):
        load_config(config_path)


def test_load_config_empty_file(temp_dir):
    config_path = os.path.join(temp_dir, "empty.yml")
    open(config_path, "w").close()
    assert load_config(config_path) == DEFAULT_CONFIG


def test_get_config_paths():
    paths = get_config_paths()
    assert paths[0] == os.path.join(os.getcwd(), "ghwatch.yml")
    assert any(p.endswith(os.path.join(".config", "ghwatch", "config.yml")) for p in paths)


def test_merge_configs():
    base = {"a": 1, "nested": {"x": 1, "y": 2}}
    merged = merge_configs(base, {"b": 2, "nested": {"y": 3}})

    assert merged == {"a": 1, "b": 2, "nested": {"x": 1, "y": 3}}
    assert base["nested"]["y"] == 2


@pytest.mark.parametrize(
    "config",
    [
        {"unknown_option": True},
        {"check_script_injection": "yes"},
        {"fail_fast": 1},
        {"untrusted_context_patterns": "issue.title"},
        {"untrusted_context_patterns": ["("]},
        {"untrusted_context_patterns": [42]},
        {"github": "https://api.github.com"},
        {"github": {"unknown": 1}},
        {"github": {"timeout": 0}},
        {"github": {"per_page": True}},
        {"github": {"token_env": "GITHUB_TOKEN"}},
        {"report": {"verbose": "yes"}},
    ],
)
def test_validate_config_rejects(config):
    with pytest.raises(ConfigurationError):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(DEFAULT_CONFIG)


def test_save_and_generate_config(temp_dir):
    config_path = os.path.join(temp_dir, "nested", "ghwatch.yml")
    save_config({"fail_fast": True}, config_path)
    assert load_config(config_path)["fail_fast"] is True

    output_path = os.path.join(temp_dir, "default.yml")
    text = generate_default_config(output_path)
    assert "check_imposter_commits: true" in text
    assert load_config(output_path) == DEFAULT_CONFIG


def test_disable_rules():
    config = disable_rules(DEFAULT_CONFIG, ["script_injection", "check_imposter_commits"])

    assert config["check_script_injection"] is False
    assert config["check_imposter_commits"] is False
    assert config["check_untrusted_checkout"] is True
    assert DEFAULT_CONFIG["check_script_injection"] is True

    with pytest.raises(ConfigurationError):
        disable_rules(DEFAULT_CONFIG, ["no_such_rule"])
