"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from datadrop.config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    ConfigManager,
    DataDropConfig,
    flatten_for_env,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(env={})


def test_default_path_is_under_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    assert manager.config_path == DEFAULT_CONFIG_PATH.expanduser()
    assert manager.config_path == tmp_path / ".datadrop" / "config.yaml"


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    text = path.read_text(encoding="utf-8")
    assert "datadrop configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert config == DataDropConfig()
    assert config.parsing.hash_algorithm == "sha256"
    assert config.parsing.self_destruct is True


def test_precedence_file_env_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"parsing": {"hash_algorithm": "md5", "temp_dir": "/srv/tmp"}})

    env = {
        "DATADROP__PARSING__HASH_ALGORITHM": "sha1",
        "DATADROP__PARSING__ASSUME_BASE64_DATA": "true",
        "UNRELATED": "ignored",
    }
    cli = {"parsing.hash_algorithm": "sha512"}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.parsing.temp_dir == "/srv/tmp"
    assert config.parsing.assume_base64_data is True
    # CLI overrides take precedence over environment
    assert config.parsing.hash_algorithm == "sha512"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=DataDropConfig(), file_overrides={"parsing": {"retries": 3}}
        )


def test_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=DataDropConfig(),
            cli_overrides={"parsing.self_destruct": "not-a-bool"},
        )


def test_flatten_for_env_lists_every_field() -> None:
    flat = flatten_for_env(DataDropConfig())

    assert flat["DATADROP__PARSING__HASH_ALGORITHM"] == "sha256"
    assert flat["DATADROP__PARSING__TEMP_DIR"] == "null"
    assert flat["DATADROP__PARSING__SELF_DESTRUCT"] == "true"
    assert flat["DATADROP__LOGGING__LEVEL"] == "WARNING"
