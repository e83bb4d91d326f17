from pathlib import Path
from typing import Any

import yaml


def get_settings_path(output_dir: str) -> Path:
    """Returns the path to the settings.yaml file."""
    return Path(output_dir) / "settings.yaml"


def load_settings_yaml(output_dir: str) -> dict[str, Any]:
    """Loads setting overrides from YAML; a missing or broken file yields no overrides."""
    settings_path = get_settings_path(output_dir)
    if not settings_path.exists():
        return {}
    raw = settings_path.read_text(encoding="utf-8").strip()
    if not raw:
        return {}
    try:
        data = yaml.safe_load(raw)
        return data if isinstance(data, dict) else {}
    except yaml.YAMLError:
        return {}
