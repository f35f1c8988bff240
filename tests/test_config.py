"""Configuration resolution and logger setup."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from charisma.config import MISTRAL_MODELS, CharismaConfig, load_config
from charisma.log import get_logger, setup_logging


def test_defaults_without_environment():
    cfg = load_config(env={})
    assert cfg.api_key == ""
    assert not cfg.has_api_key
    assert cfg.model == "codestral-latest"
    assert cfg.temperature == 0.3
    assert cfg.output_dir == (Path.cwd() / "generated").resolve()
    assert cfg.history_path == (Path.cwd() / "charisma_history.json").resolve()
    assert cfg.log_path is None
    assert cfg.history_limit == 5


def test_environment_overrides(tmp_path):
    cfg = load_config(env={
        "MISTRAL_API_KEY": " sk-123 ",
        "CHARISMA_MODEL": "mistral-small-latest",
        "CHARISMA_TEMPERATURE": "0.7",
        "CHARISMA_OUTPUT_DIR": str(tmp_path / "out"),
        "CHARISMA_HISTORY_FILE": str(tmp_path / "h.json"),
        "CHARISMA_LOG_LEVEL": "debug",
        "CHARISMA_LOG_FILE": str(tmp_path / "logs" / "charisma.log"),
    })
    assert cfg.api_key == "sk-123"
    assert cfg.model == "mistral-small-latest"
    assert cfg.temperature == 0.7
    assert cfg.output_dir == (tmp_path / "out").resolve()
    assert cfg.history_path == (tmp_path / "h.json").resolve()
    assert cfg.log_level == "DEBUG"
    assert cfg.log_path == (tmp_path / "logs" / "charisma.log").resolve()
    assert cfg.model in MISTRAL_MODELS


def test_generic_api_key_fallback():
    assert load_config(env={"API_KEY": "legacy"}).api_key == "legacy"
    assert load_config(env={"API_KEY": "legacy", "MISTRAL_API_KEY": "new"}).api_key == "new"


@pytest.mark.parametrize("var, value, message", [
    ("CHARISMA_TEMPERATURE", "hot", "temperature"),
    ("CHARISMA_TEMPERATURE", "1.5", "temperature"),
    ("CHARISMA_MODEL", "gpt-4", "model"),
    ("CHARISMA_LOG_LEVEL", "loud", "log_level"),
])
def test_invalid_values(var, value, message):
    with pytest.raises(ValueError, match=message):
        load_config(env={var: value})


def test_config_is_frozen():
    cfg = CharismaConfig()
    with pytest.raises(Exception):
        cfg.model = "other"


def test_ensure_output_dir(tmp_path):
    cfg = CharismaConfig(output_dir=tmp_path / "a" / "generated")
    assert cfg.ensure_output_dir().is_dir()


def test_get_logger_namespace():
    assert get_logger().name == "charisma"
    assert get_logger("history").name == "charisma.history"
    assert get_logger("charisma.core").name == "charisma.core"


def test_setup_logging_to_file(tmp_path):
    base = logging.getLogger("charisma")
    saved = list(base.handlers)
    base.handlers.clear()
    try:
        cfg = CharismaConfig(log_level="INFO", log_path=tmp_path / "logs" / "c.log")
        setup_logging(cfg)
        get_logger("test").info("hello from test")
        for h in base.handlers:
            h.flush()
        assert "hello from test" in (tmp_path / "logs" / "c.log").read_text("utf-8")
    finally:
        for h in base.handlers:
            h.close()
        base.handlers[:] = saved


def test_setup_logging_stderr_only_warnings():
    base = logging.getLogger("charisma")
    saved = list(base.handlers)
    base.handlers.clear()
    stream = io.StringIO()
    try:
        setup_logging(CharismaConfig(log_level="DEBUG"), stream=stream)
        get_logger("test").info("quiet")
        get_logger("test").warning("loud")
        assert "loud" in stream.getvalue()
        assert "quiet" not in stream.getvalue()
    finally:
        base.handlers[:] = saved
