"""Runtime settings for the sales console, read from secrets or the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

Number = TypeVar("Number", int, float)

DEFAULT_ENV_FILE = Path("secrets/console.env")
DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_REFRESH_INTERVAL_MS = 30_000
DEFAULT_DEBOUNCE_MS = 500
DEFAULT_TAX_RATE = 0.08
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_EXPORT_DIR = Path("output")


def _streamlit_secret(key: str) -> Optional[str]:
    try:
        import streamlit as st

        secrets = st.secrets
        if key in secrets:
            return str(secrets[key])
    except (ImportError, FileNotFoundError, KeyError):
        return None
    return None


def get_config_value(key: str, default: str = "") -> str:
    """Return ``key`` from Streamlit secrets, then the environment, then ``default``.

    The hosted dashboard is configured through secrets; the CLI only ever
    sees environment variables.
    """

    secret = _streamlit_secret(key)
    if secret is not None:
        return secret
    return os.getenv(key, default)


def parse_env_lines(lines: Iterable[str]) -> Dict[str, str]:
    """Parse ``KEY=value`` lines, skipping blanks and comments and allowing ``export``."""

    values: Dict[str, str] = {}
    for raw_line in lines:
        line = raw_line.strip()
        if line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, separator, value = line.partition("=")
        key = key.strip()
        if separator and key:
            values[key] = value.strip().strip("\"'")
    return values


def load_env_file(path: Path) -> Dict[str, str]:
    """Copy settings from ``path`` into ``os.environ`` and return the keys applied.

    Keys already present in the environment are left alone.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        logger.warning("Could not read env file %s: %s", path, exc)
        return {}

    applied: Dict[str, str] = {}
    for key, value in parse_env_lines(text.splitlines()).items():
        if key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    if applied:
        logger.debug("Loaded %s from %s", ", ".join(sorted(applied)), path)
    return applied


def _as_number(key: str, default: Number, cast: Callable[[str], Number]) -> Number:
    raw = get_config_value(key, "")
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", key, raw, default)
        return default


def _to_int(raw: str) -> int:
    return int(float(raw))


@dataclass
class ConsoleSettings:
    """Everything the console needs to reach the backend and schedule refreshes."""

    base_url: str = DEFAULT_BASE_URL
    refresh_interval_ms: int = DEFAULT_REFRESH_INTERVAL_MS
    auto_refresh: bool = True
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    tax_rate: float = DEFAULT_TAX_RATE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    export_dir: Path = DEFAULT_EXPORT_DIR

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "ConsoleSettings":
        """Build settings from secrets, the environment, and an optional env file."""

        env_path = env_file or Path(os.getenv("SALES_CONSOLE_ENV_FILE", DEFAULT_ENV_FILE))
        load_env_file(env_path)

        return cls(
            base_url=get_config_value("SALES_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            refresh_interval_ms=_as_number("SALES_REFRESH_INTERVAL_MS", DEFAULT_REFRESH_INTERVAL_MS, _to_int),
            auto_refresh=get_config_value("SALES_AUTO_REFRESH", "1") not in {"0", "false", "False", "no"},
            debounce_ms=_as_number("SALES_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS, _to_int),
            tax_rate=_as_number("SALES_TAX_RATE", DEFAULT_TAX_RATE, float),
            request_timeout=_as_number("SALES_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float),
            export_dir=Path(get_config_value("SALES_EXPORT_DIR", str(DEFAULT_EXPORT_DIR))),
        )
