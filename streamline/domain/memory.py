"""Memory operation density."""

from typing import Iterable, Optional, Sequence

from streamline.domain.entities import Operation
from streamline.domain.store import FunctionStore

MEMORY_OPERATION_TYPES = ("load", "store")


def memory_density(operations: Sequence[Operation], memory_types: Iterable[str] = MEMORY_OPERATION_TYPES) -> Optional[float]:
    """Fraction of load/store operations, or None for a function without operations."""
    if not operations:
        return None
    types = set(memory_types)
    count = sum(1 for op in operations if op.op_type in types)
    return count / len(operations)


def calculate_memory_density(store: FunctionStore, memory_types: Iterable[str] = MEMORY_OPERATION_TYPES):
    types = tuple(memory_types)
    for function in store:
        function.memory_density = memory_density(function.operations, types)
