import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from .models import AgentConfig


ENV_PREFIX = "LR_"


class ConfigManager:
    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self.config: Optional[AgentConfig] = None
        self.load_config()

    def load_config(self) -> AgentConfig:
        """Load configuration from file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        # Merge with environment variables
        config_data = self._merge_env_vars(config_data)

        agent_config = config_data.get('agent', {})
        self.config = AgentConfig(**agent_config)

        # Remaining sections (api, scheduler, scan, server) ride along as extras
        for key, value in config_data.items():
            if key != 'agent':
                setattr(self.config, key, value)

        return self.config

    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge LR_-prefixed environment variables into the config.

        LR_SCHEDULER_BASE_URL becomes scheduler.base_url; a name without
        an underscore after the prefix sets a top-level key.
        """
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config_key = key[len(ENV_PREFIX):].lower()

                if '_' in config_key:
                    section, nested_key = config_key.split('_', 1)

                    if not isinstance(config_data.get(section), dict):
                        config_data[section] = {}

                    config_data[section][nested_key] = value
                else:
                    config_data[config_key] = value

        return config_data

    def get_config(self) -> AgentConfig:
        """Get current configuration"""
        if self.config is None:
            self.load_config()
        return self.config

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get a specific configuration section"""
        if self.config is None:
            self.load_config()
        value = getattr(self.config, section, None)
        return value if isinstance(value, dict) else {}

    def create_directories(self):
        """Create the data and log directories"""
        if self.config is None:
            return

        for dir_path in (self.config.data_dir, self.config.logs_dir):
            Path(dir_path).mkdir(parents=True, exist_ok=True)
