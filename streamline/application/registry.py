"""Data-driven backend registry for Streamline."""

from dataclasses import dataclass
from importlib import import_module
from typing import Dict, Tuple, Any

from streamline.domain.backend import AnalysisBackend
from streamline.domain.errors import ConfigurationError


@dataclass(frozen=True)
class BackendSpec:
    key: str
    import_path: str
    class_name: str


DEFAULT_REGISTRY: Tuple[BackendSpec, ...] = (
    BackendSpec("radare2", "streamline.infrastructure.radare2.backend", "Radare2Backend"),
    BackendSpec("feed", "streamline.infrastructure.feed.backend", "FeedBackend"),
)


def _load_class(import_path: str, class_name: str):
    module = import_module(import_path)
    return getattr(module, class_name)


def available_backends(registry: Tuple[BackendSpec, ...] = DEFAULT_REGISTRY) -> Tuple[str, ...]:
    return tuple(spec.key for spec in registry)


def build_backend(key: str, firmware: str, config: Dict[str, Any] = None,
                  registry: Tuple[BackendSpec, ...] = DEFAULT_REGISTRY) -> AnalysisBackend:
    """Instantiate the backend registered under ``key`` for one firmware image."""
    for spec in registry:
        if spec.key != key:
            continue
        cls = _load_class(spec.import_path, spec.class_name)
        return cls(firmware, (config or {}).get(spec.key, {}))
    raise ConfigurationError(
        f"Unknown analysis backend '{key}' (available: {', '.join(available_backends(registry))})"
    )
