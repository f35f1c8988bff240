#!/usr/bin/env python3
"""Charisma — config.py

Settings are resolved once at start-up by load_config() and the resulting
CharismaConfig is handed to every component that needs it.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

MISTRAL_MODELS = (
    "codestral-latest",
    "mistral-large-latest",
    "mistral-medium-latest",
    "mistral-small-latest",
)

DEFAULT_CONFIG: dict[str, Any] = {
    "model": "codestral-latest",
    "temperature": 0.3,
    "output_dir": "generated",
    "history_path": "charisma_history.json",
    "log_level": "WARNING",
    "log_path": "",
    "syntax_theme": "monokai",
    "history_limit": 5,
}

# environment variable -> config key
ENV_KEYS: dict[str, str] = {
    "CHARISMA_MODEL":        "model",
    "CHARISMA_TEMPERATURE":  "temperature",
    "CHARISMA_OUTPUT_DIR":   "output_dir",
    "CHARISMA_HISTORY_FILE": "history_path",
    "CHARISMA_LOG_LEVEL":    "log_level",
    "CHARISMA_LOG_FILE":     "log_path",
    "CHARISMA_SYNTAX_THEME": "syntax_theme",
}

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_RULES: dict[str, tuple] = {
    "temperature":   (float, 0.0, 1.0, None),
    "history_limit": (int,   1,   100, None),
    "model":         (str,   None, None, MISTRAL_MODELS),
    "log_level":     (str,   None, None, _LOG_LEVELS),
}


def _validate(key: str, value: Any) -> Any:
    if key == "log_level" and isinstance(value, str):
        value = value.upper()
    if key not in _RULES:
        return value
    typ, vmin, vmax, allowed = _RULES[key]
    try: value = typ(value)
    except (TypeError, ValueError): raise ValueError(f"'{key}' must be {typ.__name__}")
    if vmin is not None and value < vmin: raise ValueError(f"'{key}' >= {vmin}")
    if vmax is not None and value > vmax: raise ValueError(f"'{key}' <= {vmax}")
    if allowed and value not in allowed:
        raise ValueError(f"'{key}' must be: {', '.join(str(a) for a in allowed)}")
    return value


@dataclass(frozen=True)
class CharismaConfig:
    api_key: str = ""
    model: str = DEFAULT_CONFIG["model"]
    temperature: float = DEFAULT_CONFIG["temperature"]
    output_dir: Path = Path(DEFAULT_CONFIG["output_dir"])
    history_path: Path = Path(DEFAULT_CONFIG["history_path"])
    log_level: str = DEFAULT_CONFIG["log_level"]
    log_path: Optional[Path] = None
    syntax_theme: str = DEFAULT_CONFIG["syntax_theme"]
    history_limit: int = DEFAULT_CONFIG["history_limit"]

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def ensure_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir


def load_config(env: Optional[Mapping[str, str]] = None,
                dotenv_path: Optional[str] = None) -> CharismaConfig:
    """Build the process-wide configuration.

    When ``env`` is omitted the real environment is used, after merging any
    ``.env`` file found (variables already set are left alone). Paths are
    resolved against the current directory.
    """
    if env is None:
        load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)
        env = os.environ

    data = dict(DEFAULT_CONFIG)
    for var, key in ENV_KEYS.items():
        raw = env.get(var)
        if raw is not None and raw.strip() != "":
            data[key] = raw.strip()
    data = {k: _validate(k, v) for k, v in data.items()}

    api_key = (env.get("MISTRAL_API_KEY") or env.get("API_KEY") or "").strip()
    log_path = Path(data["log_path"]).expanduser().resolve() if data["log_path"] else None

    return CharismaConfig(
        api_key=api_key,
        model=data["model"],
        temperature=data["temperature"],
        output_dir=Path(data["output_dir"]).expanduser().resolve(),
        history_path=Path(data["history_path"]).expanduser().resolve(),
        log_level=data["log_level"],
        log_path=log_path,
        syntax_theme=data["syntax_theme"],
        history_limit=data["history_limit"],
    )
