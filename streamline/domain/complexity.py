"""Complexity grouping: call-in counts, complexity classes and buckets."""

import math
from typing import Dict

from streamline.domain.entities import ComplexityGroup
from streamline.domain.store import FunctionStore


def calculate_reference_relationship(store: FunctionStore):
    for function in store:
        function.call_in_count = len(function.callers)


def complexity_index(cc: int, call_in_count: int) -> int:
    """floor(ln(cc)) + call-in count.

    The logarithm term is clamped to 0 for ``cc <= 1``, so a reported
    complexity of 0 behaves like 1 instead of producing -inf.
    """
    log_term = math.floor(math.log(cc)) if cc > 1 else 0
    return max(0, log_term + call_in_count)


def calculate_complexity_index(store: FunctionStore):
    for function in store:
        function.complexity_index = complexity_index(function.cc, function.call_in_count)


def group_functions(store: FunctionStore) -> Dict[int, ComplexityGroup]:
    """Bucket functions by complexity index, ascending; index 0 is dropped."""
    groups: Dict[int, ComplexityGroup] = {}
    for function in store:
        if function.complexity_index <= 0:
            continue
        group = groups.get(function.complexity_index)
        if group is None:
            group = ComplexityGroup(function.complexity_index)
            groups[function.complexity_index] = group
        group.functions.append(function.address)
    return {key: groups[key] for key in sorted(groups)}


def complexity_grouping(store: FunctionStore) -> Dict[int, ComplexityGroup]:
    calculate_reference_relationship(store)
    calculate_complexity_index(store)
    return group_functions(store)
