"""Configuration for the Alpha Vantage fundamentals pipeline."""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Environment variable names
ENV_API_KEY = "ALPHA_VANTAGE_API_KEY"
ENV_BASE_URL = "ALPHA_VANTAGE_BASE_URL"
ENV_TIMEOUT = "ALPHA_VANTAGE_TIMEOUT"
ENV_SNAPSHOT_DIR = "FUNDAMENTALS_SNAPSHOT_DIR"
ENV_CONCURRENT_FETCH = "FUNDAMENTALS_CONCURRENT_FETCH"

# Defaults
DEFAULT_BASE_URL = "https://www.alphavantage.co/query"
DEFAULT_TIMEOUT = 30.0


@dataclass
class ProviderSettings:
    """Settings for talking to Alpha Vantage.

    The credential is carried here and handed to the client explicitly;
    nothing reads the environment after settings are built.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    snapshot_dir: Path | None = None
    concurrent: bool = True

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key.strip())


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        logger.warning(f"[Config] Invalid {ENV_TIMEOUT}={value!r}, using {DEFAULT_TIMEOUT}")
        return DEFAULT_TIMEOUT
    if not math.isfinite(timeout) or timeout <= 0:
        logger.warning(
            f"[Config] {ENV_TIMEOUT} must be a positive finite number, using {DEFAULT_TIMEOUT}"
        )
        return DEFAULT_TIMEOUT
    return timeout


def _parse_bool(value: str, default: bool) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    logger.warning(f"[Config] Unrecognized boolean {value!r}, using {default}")
    return default


def load_settings() -> ProviderSettings:
    """Build provider settings from environment variables.

    Reads:
    - ALPHA_VANTAGE_API_KEY: provider credential (default: empty)
    - ALPHA_VANTAGE_BASE_URL: query endpoint (default: public API)
    - ALPHA_VANTAGE_TIMEOUT: per-request timeout in seconds (default: 30)
    - FUNDAMENTALS_SNAPSHOT_DIR: if set, raw responses are written there
    - FUNDAMENTALS_CONCURRENT_FETCH: fetch the four reports in parallel (default: true)

    Returns:
        ProviderSettings
    """
    timeout_str = os.environ.get(ENV_TIMEOUT, "")
    snapshot_str = os.environ.get(ENV_SNAPSHOT_DIR, "")
    concurrent_str = os.environ.get(ENV_CONCURRENT_FETCH, "")

    return ProviderSettings(
        api_key=os.environ.get(ENV_API_KEY, "").strip(),
        base_url=os.environ.get(ENV_BASE_URL, "") or DEFAULT_BASE_URL,
        timeout=_parse_timeout(timeout_str) if timeout_str else DEFAULT_TIMEOUT,
        snapshot_dir=Path(snapshot_str) if snapshot_str else None,
        concurrent=_parse_bool(concurrent_str, True) if concurrent_str else True,
    )
