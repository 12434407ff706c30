"""Loading of the sensitive function weight table (YAML)."""

import os
from typing import Optional

import yaml

from streamline.domain.errors import ConfigurationError
from streamline.domain.sensitivity import SensitiveFunctionTable

DEFAULT_TABLE_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "data",
    "sensitive_functions.yaml",
)


def load_sensitive_functions(path: Optional[str] = None) -> SensitiveFunctionTable:
    """Load ``name: weight`` pairs; any problem is a fatal configuration error."""
    path = path or DEFAULT_TABLE_PATH
    if not os.path.isfile(path):
        raise ConfigurationError("Path of sensitive function file does not exist or is not a file")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"Reading file with sensitive functions failed: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Parsing file with sensitive functions failed: {exc}") from exc
    if not isinstance(raw, dict) or not raw:
        raise ConfigurationError("Parsing file with sensitive functions failed: expected a non-empty mapping")
    return SensitiveFunctionTable(raw)
