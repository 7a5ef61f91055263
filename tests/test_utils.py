import json
import logging
import logging.handlers

import pytest

from utils import load_config, parse_positive_float, parse_positive_int, setup_logging


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"run_control": {"max_steps": 3}}))
    assert load_config(str(path)) == {"run_control": {"max_steps": 3}}


def test_load_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_malformed(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "sim.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
    logging.info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello from the test" in log_file.read_text()
    assert logging.getLogger().level == logging.DEBUG
    logging.getLogger().handlers.clear()


@pytest.mark.parametrize("text", ["0", "-3", "abc", "2.5"])
def test_parse_positive_int_rejects(text):
    with pytest.raises(ValueError):
        parse_positive_int(text)


@pytest.mark.parametrize("text", ["0", "-1.5", "nan", "inf", "x"])
def test_parse_positive_float_rejects(text):
    with pytest.raises(ValueError):
        parse_positive_float(text)


def test_parse_positive_values():
    assert parse_positive_int("12") == 12
    assert parse_positive_float("0.5") == 0.5


def test_load_config_rejects_non_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_setup_logging_console_and_rotation(tmp_path):
    log_file = tmp_path / "sim.log"
    try:
        setup_logging({"logging": {"log_file": str(log_file), "console": True,
                                   "max_bytes": 2048, "backup_count": 2}})
        handlers = logging.getLogger().handlers
        rotating = [h for h in handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(rotating) == 1
        assert rotating[0].maxBytes == 2048
        assert rotating[0].backupCount == 2
        assert len(handlers) == 2

        # A second call replaces the handlers instead of stacking them.
        setup_logging({"logging": {"log_file": str(log_file)}})
        assert len(logging.getLogger().handlers) == 1
    finally:
        logging.getLogger().handlers.clear()
