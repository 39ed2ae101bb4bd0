import copy
import json
import os
from pathlib import Path
from typing import Any, Optional

DEFAULT_CONFIG = {
    "typst": "typst",
    "font_paths": [],
    "ignore_system_fonts": False,
    "root": None,
    "log_file": None,
}

# Overrides the "typst" key without touching the config file
ENV_BINARY = "TYPSTRUN_BINARY"


class ConfigManager:
    """
    Loads ~/.typstrun/config.json merged over DEFAULT_CONFIG.
    """
    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".typstrun"
        self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> dict:
        config = copy.deepcopy(DEFAULT_CONFIG)
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            # Read-only home directories still get the defaults
            pass

        if self.config_file.exists():
            try:
                with open(self.config_file, "r") as f:
                    user_config = json.load(f)
                if isinstance(user_config, dict):
                    config.update(user_config)
            except (json.JSONDecodeError, OSError) as e:
                print(f"Warning: ignoring unreadable config {self.config_file}: {e}")

        env_binary = os.environ.get(ENV_BINARY)
        if env_binary:
            config["typst"] = env_binary
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()
