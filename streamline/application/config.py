"""Configuration management for Streamline."""

import copy
import json
import os
from typing import Dict, Any, List

from streamline.presentation.logger import info, warn


class Config:
    """Configuration manager for Streamline."""

    DEFAULT_CONFIG = {
        "general": {
            "output_file": "_streamline_targets.json",
            "csv_output_file": "_streamline_targets.csv",
            "details_output_file": "_streamline_targets_details.txt",
            "feed_output_file": None,
            "output_name_mode": "firmware",
            "log_file": None,
            "log_level": "info",
        },
        "analysis": {
            "backend": "radare2",
            "sensitive_functions_file": None,
            "namespace_separator": ".",
            "call_reference_types": ["CALL"],
            "memory_operation_types": ["load", "store"],
        },
        "backends": {
            "radare2": {
                "analysis_command": "aaa",
                "restrict_operations_to_range": True,
            },
            "feed": {
                "feed_file": None,
            },
        },
    }

    def __init__(self, config_file: str = None):
        self.config_file = config_file or "streamline_config.json"
        self.config = self.load_config()
        self.validation_errors = self.validate_config(self.config)
        for err in self.validation_errors:
            warn(f"Config warning: {err}")

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file or use defaults."""
        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, 'r', encoding="utf-8") as f:
                    user_config = json.load(f)
                if not isinstance(user_config, dict):
                    raise ValueError("top-level value must be an object")
                return self._merge_configs(self.DEFAULT_CONFIG, user_config)
            except (OSError, ValueError) as e:
                warn(f"Error loading config {self.config_file}: {e}, using defaults")
                return copy.deepcopy(self.DEFAULT_CONFIG)
        return copy.deepcopy(self.DEFAULT_CONFIG)

    def validate_config(self, config: Dict[str, Any]) -> List[str]:
        """Validate configuration keys and report unknown/invalid entries."""
        errors: List[str] = []
        schema = self._schema()

        def walk(node, spec, path):
            if not isinstance(node, dict):
                errors.append(f"Expected object at '{path}'")
                return
            for key, val in node.items():
                if key not in spec:
                    errors.append(f"Unknown config key: {path + key}")
                    continue
                expected = spec[key]
                if isinstance(expected, dict):
                    if isinstance(val, dict):
                        walk(val, expected, path + key + ".")
                    else:
                        errors.append(f"Expected object at '{path + key}'")
            for key in spec.keys():
                if key not in node:
                    errors.append(f"Missing config key: {path + key}")

        walk(config, schema, "")
        return errors

    def _schema(self) -> Dict[str, Any]:
        """Return a minimal schema for config validation."""
        return {
            "general": {
                "output_file": None,
                "csv_output_file": None,
                "details_output_file": None,
                "feed_output_file": None,
                "output_name_mode": None,
                "log_file": None,
                "log_level": None,
            },
            "analysis": {
                "backend": None,
                "sensitive_functions_file": None,
                "namespace_separator": None,
                "call_reference_types": None,
                "memory_operation_types": None,
            },
            "backends": {
                "radare2": {
                    "analysis_command": None,
                    "restrict_operations_to_range": None,
                },
                "feed": {
                    "feed_file": None,
                },
            },
        }

    def save_config(self):
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding="utf-8") as f:
            json.dump(self.config, f, indent=4)
        info(f"Configuration saved to {self.config_file}")

    def _merge_configs(self, default: Dict, user: Dict) -> Dict:
        """Recursively merge user config with defaults."""
        result = copy.deepcopy(default)
        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path (e.g., 'analysis.backend')."""
        keys = path.split('.')
        value = self.config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, path: str, value: Any):
        """Set config value by dot-notation path."""
        keys = path.split('.')
        target = self.config
        for key in keys[:-1]:
            if key not in target:
                target[key] = {}
            target = target[key]
        target[keys[-1]] = value

    def get_backend_config(self, backend_name: str) -> Dict[str, Any]:
        """Get configuration for a specific backend."""
        return self.config.get("backends", {}).get(backend_name, {})
