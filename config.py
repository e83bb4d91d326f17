# config.py
import os
from dotenv import load_dotenv

from utils.settings import load_settings_yaml

# Load environment variables from .env file.
load_dotenv()

_config = None


def load_config():
    """
    Loads configuration from environment variables and returns a dictionary.
    Values found in <OUTPUT_DIR>/settings.yaml override the environment.
    """
    output_dir = os.getenv("OUTPUT_DIR", "./output")

    config = {
        # General Settings
        "DEBUG_MODE": os.getenv("DEBUG_MODE", "False").lower() == "true",
        "OUTPUT_DIR": output_dir,

        # Inference Service Settings
        "INFERENCE_BASE_URL": os.getenv("INFERENCE_BASE_URL", "http://localhost:8000").rstrip("/"),
        "INFERENCE_TIMEOUT": float(os.getenv("INFERENCE_TIMEOUT", 30)),

        # Report Settings
        "TIMESTAMP_FORMAT": os.getenv("TIMESTAMP_FORMAT", "%m/%d/%Y, %I:%M:%S %p"),

        # Preview Settings
        "PREVIEW_SIZE": int(os.getenv("PREVIEW_SIZE", 128)),

        # Web Settings
        "WEB_HOST": os.getenv("WEB_HOST", "0.0.0.0"),
        "WEB_PORT": int(os.getenv("WEB_PORT", 8050)),
        "MAX_UPLOAD_MB": int(os.getenv("MAX_UPLOAD_MB", 64)),
    }

    overrides = load_settings_yaml(output_dir)
    for key, value in overrides.items():
        if key in config and value is not None:
            config[key] = value
    return config


def get_config():
    """Returns the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


if __name__ == "__main__":
    # For testing purposes, print the configuration
    config = load_config()
    from pprint import pprint

    pprint(config)
