"""Vulnerability feature ranking.

Scores are ``Optional[float]``: ``None`` means undefined (no operations were
recorded for the function). The order used everywhere is:

* defined scores, highest first
* undefined scores after every defined score, all equal to each other
* ties broken by ascending address
"""

from typing import Dict, Iterable, Optional, Tuple

from streamline.domain.entities import ComplexityGroup
from streamline.domain.memory import MEMORY_OPERATION_TYPES, calculate_memory_density
from streamline.domain.sensitivity import (
    DEFAULT_NAMESPACE_SEPARATOR,
    SensitiveFunctionTable,
    calculate_sensitivity_index,
)
from streamline.domain.store import FunctionStore

Score = Optional[float]


def combine_scores(sensitivity: float, density: Score) -> Score:
    if density is None:
        return None
    return sensitivity + density


def is_positive(score: Score) -> bool:
    return score is not None and score > 0


def score_sort_key(score: Score, address: int) -> Tuple[int, float, int]:
    if score is None:
        return (1, 0.0, address)
    return (0, -score, address)


def calculate_vulnerability_index(store: FunctionStore):
    for function in store:
        function.vulnerability_score = combine_scores(function.sensitivity_score, function.memory_density)


def rank_functions(store: FunctionStore, groups: Dict[int, ComplexityGroup]):
    def key(address: int):
        function = store.get(address)
        score = function.vulnerability_score if function is not None else None
        return score_sort_key(score, address)

    for group in groups.values():
        group.functions.sort(key=key)


def vulnerability_feature_ranking(store: FunctionStore, groups: Dict[int, ComplexityGroup],
                                  table: SensitiveFunctionTable,
                                  separator: str = DEFAULT_NAMESPACE_SEPARATOR,
                                  memory_types: Iterable[str] = MEMORY_OPERATION_TYPES):
    calculate_sensitivity_index(store, table, separator)
    calculate_memory_density(store, memory_types)
    calculate_vulnerability_index(store)
    rank_functions(store, groups)
