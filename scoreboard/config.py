"""
Configuration loader
"""
import os
import yaml
from pathlib import Path
from scoreboard.models import Settings


DEFAULT_CONFIG_PATH = "config/scoreboard.yaml"

# Environment variables that override keys of the YAML file
ENV_OVERRIDES = {
    "SUPABASE_URL": "supabase_url",
    "SUPABASE_KEY": "supabase_key",
    "SCOREBOARD_USER_ID": "user_id",
}


def load_config(config_path: str = None) -> Settings:
    """
    Load configuration from YAML file

    Args:
        config_path: Path to config file (default: $SCOREBOARD_CONFIG or
            config/scoreboard.yaml)

    Returns:
        Settings object
    """
    path = Path(config_path or os.getenv("SCOREBOARD_CONFIG", DEFAULT_CONFIG_PATH))

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[key] = value

    return Settings(**data)
