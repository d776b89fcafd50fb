"""Configuration management for banknoti."""

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from banknoti.catalog import CatalogSnapshot
from banknoti.models import CustomBankPattern, Merchant

# Default config filename
CONFIG_FILENAME = "config.json"


@dataclass(frozen=True)
class PipelinePolicy:
    """Tunable thresholds for the notification pipeline."""

    duplicate_window_seconds: float = 120
    deactivation_min_samples: int = 5
    high_amount_threshold: int = 1_000_000
    auto_apply_min_use_count: int = 2


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "banknoti"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. config.json in current directory
    2. XDG config: ~/.config/banknoti/config.json
    """
    config_paths = [
        Path(CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(config_path, encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def save_json_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to a JSON file.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save to (defaults to XDG config location)

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)
        f.write("\n")

    return config_path


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to config.json file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def config_exists() -> bool:
    """Check if any config file exists."""
    return find_config_file() is not None


def get_custom_patterns(config: dict[str, Any] | None = None) -> list[CustomBankPattern]:
    """Get user bank patterns from config, in the order they are listed."""
    if not config:
        return []
    return [CustomBankPattern.from_dict(item) for item in config.get("custom_banks", []) if isinstance(item, dict)]


def get_custom_merchants(config: dict[str, Any] | None = None) -> list[Merchant]:
    if not config:
        return []
    return [Merchant.from_dict(item) for item in config.get("custom_merchants", []) if isinstance(item, dict)]


def get_selected_banks(config: dict[str, Any] | None = None) -> list[str] | None:
    """Get the enabled default bank ids.

    Returns:
        List of bank ids, or None when every default bank is enabled
    """
    if not config:
        return None
    selected = config.get("selected_banks")
    if not selected:
        return None
    return [str(bank_id) for bank_id in selected]


def get_policy(config: dict[str, Any] | None = None) -> PipelinePolicy:
    """Get pipeline policy, falling back to defaults for missing keys."""
    if not config:
        return PipelinePolicy()

    policy_config = config.get("policy") or {}
    known = {f.name for f in fields(PipelinePolicy)}
    values: dict[str, Any] = {}
    for key, value in policy_config.items():
        if key not in known or value is None:
            continue
        values[key] = float(value) if key == "duplicate_window_seconds" else int(value)
    return PipelinePolicy(**values)


def get_firestore_settings(
    config: dict[str, Any] | None = None,
    id_token: str | None = None,
) -> dict[str, str] | None:
    """Get Firestore connection settings.

    Args:
        config: Loaded JSON config
        id_token: Optional token to use instead of config

    Returns:
        Dict with project_id, database and id_token, or None if not configured
    """
    fs_config = (config or {}).get("firestore") or {}
    project_id = fs_config.get("project_id")
    token = id_token or fs_config.get("id_token") or os.getenv("BANKNOTI_ID_TOKEN")
    if not project_id or not token:
        return None

    return {
        "project_id": project_id,
        "database": fs_config.get("database") or "(default)",
        "id_token": token,
    }


def build_catalog(config: dict[str, Any] | None = None) -> CatalogSnapshot:
    """Build a fresh catalog snapshot from config. Never cached."""
    return CatalogSnapshot.build(
        custom_patterns=get_custom_patterns(config),
        custom_merchants=get_custom_merchants(config),
        selected_bank_ids=get_selected_banks(config),
    )


def create_default_config() -> dict[str, Any]:
    """Create a default configuration."""
    return {
        "selected_banks": [],
        "custom_banks": [],
        "custom_merchants": [],
        "policy": asdict(PipelinePolicy()),
        "firestore": {
            "project_id": None,
            "database": "(default)",
            "id_token": None,
        },
    }
