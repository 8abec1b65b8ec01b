import json
import logging
from pathlib import Path

import pytest

from bf2_migrator.config import MigratorConfig, get_config_path, load_config, save_config
from bf2_migrator.exceptions import BaseError, ConfigurationError, PatchLockError, ValidationError
from bf2_migrator.logging_config import JsonFormatter, _parse_size_string, cleanup_logging, get_logger, setup_logging


def test_missing_config_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(str(tmp_path / "config.json"))

    assert config.quiescence.max_attempts == 5
    assert config.quiescence.poll_interval_sec == 1.0
    assert "bf2hub.exe" in config.quiescence.process_names
    assert config.install.use_patch_lock is True


def test_config_values_are_validated(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"quiescence": {"max_attempts": 0}}), encoding="utf-8")

    with pytest.raises(ValidationError) as excinfo:
        load_config(str(path))

    assert excinfo.value.error_code == "VALIDATION_ERROR"
    assert excinfo.value.details["errors"]


def test_invalid_json_is_a_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        load_config(str(path))

    assert excinfo.value.details["file_path"] == str(path)


def test_saved_config_loads_back(tmp_path: Path) -> None:
    config = MigratorConfig()
    config.install.install_dir = "C:\\Games\\Battlefield 2"
    config.logging.level = "debug"

    path = save_config(config, str(tmp_path / "nested" / "config.json"))
    loaded = load_config(path)

    assert loaded.install.install_dir == "C:\\Games\\Battlefield 2"
    assert loaded.logging.level == "DEBUG"


def test_config_path_env_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BF2_MIGRATOR_CONFIG", str(tmp_path / "custom.json"))

    assert get_config_path() == str(tmp_path / "custom.json")


def test_error_to_dict() -> None:
    error = PatchLockError("locked", file_name="BF2.exe", owner_pid=99)
    payload = error.to_dict()

    assert isinstance(error, BaseError)
    assert payload["error_code"] == "PATCH_LOCKED"
    assert payload["details"] == {"file_name": "BF2.exe", "owner_pid": 99}


def test_json_formatter_includes_error_code() -> None:
    record = logging.LogRecord(
        name="bf2_migrator.patching",
        level=logging.ERROR,
        pathname=__file__,
        lineno=10,
        msg="patch failed",
        args=(),
        exc_info=None,
    )
    record.error_code = "OCCURRENCE_MISMATCH"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "patch failed"
    assert payload["level"] == "ERROR"
    assert payload["error_code"] == "OCCURRENCE_MISMATCH"


def test_setup_logging_writes_log_files(tmp_path: Path) -> None:
    try:
        result = setup_logging(log_level="DEBUG", log_dir=str(tmp_path), enable_console_logging=False)
        get_logger("tests").warning("something odd")
        for handler in result["handlers"].values():
            handler.flush()

        assert set(result["handlers"]) == {"main_file", "error_file"}
        assert "something odd" in (tmp_path / "bf2_migrator.log").read_text(encoding="utf-8")
        assert "something odd" in (tmp_path / "errors.log").read_text(encoding="utf-8")
    finally:
        cleanup_logging()


def test_parse_size_string() -> None:
    assert _parse_size_string("5MB") == 5 * 1024 * 1024
    assert _parse_size_string("512 kb") == 512 * 1024
    assert _parse_size_string("garbage") == 5 * 1024 * 1024
