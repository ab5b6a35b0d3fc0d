"""
notary-verify - Configuration

Loads ledger settings from:
  1. Defaults
  2. Global user config (CLI --config or ~/.notary-verify/config.json)
  3. Environment variables

Notes:
  - app_name must match the App-Name tag the notarizer wrote.
  - page_size is clamped to the gateway's cap of 100.
"""
from __future__ import annotations

import copy
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

MAX_PAGE_SIZE = 100

DEFAULT_CONFIG: dict[str, Any] = {
    "graphql_url": "https://arweave.net/graphql",
    "info_url": "https://arweave.net/info",
    "explorer_url": "https://arscan.io/tx/{tx_id}",
    "app_name": "agentsystems-notary",
    "page_size": MAX_PAGE_SIZE,
    "timeout_seconds": 30.0,
}

_ENV_OVERRIDES = {
    "NOTARY_VERIFY_GRAPHQL_URL": ("graphql_url", str),
    "NOTARY_VERIFY_INFO_URL": ("info_url", str),
    "NOTARY_VERIFY_EXPLORER_URL": ("explorer_url", str),
    "NOTARY_VERIFY_APP_NAME": ("app_name", str),
    "NOTARY_VERIFY_PAGE_SIZE": ("page_size", int),
    "NOTARY_VERIFY_TIMEOUT": ("timeout_seconds", float),
}


@dataclass(frozen=True)
class LedgerConfig:
    """Resolved settings for talking to the ledger gateway."""
    graphql_url: str = DEFAULT_CONFIG["graphql_url"]
    info_url: str = DEFAULT_CONFIG["info_url"]
    explorer_url: str = DEFAULT_CONFIG["explorer_url"]
    app_name: str = DEFAULT_CONFIG["app_name"]
    page_size: int = MAX_PAGE_SIZE
    timeout_seconds: float = DEFAULT_CONFIG["timeout_seconds"]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerConfig":
        page_size = int(data.get("page_size", MAX_PAGE_SIZE))
        return cls(
            graphql_url=str(data.get("graphql_url", DEFAULT_CONFIG["graphql_url"])),
            info_url=str(data.get("info_url", DEFAULT_CONFIG["info_url"])),
            explorer_url=str(data.get("explorer_url", DEFAULT_CONFIG["explorer_url"])),
            app_name=str(data.get("app_name", DEFAULT_CONFIG["app_name"])),
            page_size=max(1, min(MAX_PAGE_SIZE, page_size)),
            timeout_seconds=float(data.get("timeout_seconds", DEFAULT_CONFIG["timeout_seconds"])),
        )


def default_config_path() -> Path:
    home = os.environ.get("NOTARY_VERIFY_HOME")
    base = Path(home) if home else Path.home() / ".notary-verify"
    return base / "config.json"


def load_config(config_path: Optional[Path] = None) -> LedgerConfig:
    """Load ledger config.

    `config_path` (CLI --config) replaces the default global file. Under
    pytest the default file is never read, so tests stay hermetic.

    Raises:
        ValueError: When a configured value has the wrong type.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    is_pytest = bool(os.environ.get("PYTEST_CURRENT_TEST"))
    global_path: Optional[Path] = config_path if config_path else default_config_path()
    if is_pytest and config_path is None:
        global_path = None
    if global_path is not None and global_path.exists():
        config.update(_read_json(global_path))

    _apply_env_overrides(config)
    try:
        return LedgerConfig.from_dict(config)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def _read_json(path: Path) -> dict:
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        print(f"[config] Warning: Could not read {path}: {e}", file=sys.stderr)
        return {}
    if not isinstance(data, dict):
        print(f"[config] Warning: {path} is not a JSON object, ignoring", file=sys.stderr)
        return {}
    return {k: v for k, v in data.items() if k in DEFAULT_CONFIG}


def _apply_env_overrides(config: dict) -> None:
    """Apply explicit env var overrides after file/default loading."""
    for env_name, (key, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if not raw:
            continue
        try:
            config[key] = cast(raw)
        except ValueError:
            print(f"[config] Warning: invalid {env_name}={raw!r}", file=sys.stderr)
