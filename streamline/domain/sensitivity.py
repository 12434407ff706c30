"""Sensitive function call scoring."""

import math
from types import MappingProxyType
from collections.abc import Mapping
from typing import Iterator, Optional

from streamline.domain.errors import ConfigurationError
from streamline.domain.store import FunctionStore

DEFAULT_NAMESPACE_SEPARATOR = "."


class SensitiveFunctionTable(Mapping):
    """Immutable mapping of bare function name -> positive weight."""

    def __init__(self, weights: Mapping[str, float]):
        checked = {}
        for name, weight in weights.items():
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Sensitive function name must be a non-empty string, got {name!r}")
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                raise ConfigurationError(f"Weight of sensitive function '{name}' must be a number, got {weight!r}")
            if not math.isfinite(weight) or weight <= 0:
                raise ConfigurationError(f"Weight of sensitive function '{name}' must be positive, got {weight!r}")
            checked[name] = float(weight)
        self._weights = MappingProxyType(checked)

    def __getitem__(self, name: str) -> float:
        return self._weights[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __repr__(self) -> str:
        return f"SensitiveFunctionTable({dict(self._weights)!r})"

    def weight(self, name: str) -> Optional[float]:
        return self._weights.get(name)


def bare_name(name: str, separator: str = DEFAULT_NAMESPACE_SEPARATOR) -> str:
    """Portion of a qualified symbol after the final separator ('sym.imp.memcpy' -> 'memcpy')."""
    if not name:
        return ""
    return name.rsplit(separator, 1)[-1]


def calculate_sensitivity_index(store: FunctionStore, table: SensitiveFunctionTable,
                                separator: str = DEFAULT_NAMESPACE_SEPARATOR):
    """Weighted count of calls into sensitive functions, with multiplicity."""
    for function in store:
        score = 0.0
        for call in function.calls:
            callee = store.get(call)
            if callee is None:
                continue
            fragment = bare_name(callee.name, separator)
            if not fragment:
                continue
            weight = table.weight(fragment)
            if weight is not None:
                score += weight
        function.sensitivity_score = score
