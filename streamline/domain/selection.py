"""Target selection: one top-scoring function per complexity class."""

from typing import Dict, List

from streamline.domain.entities import ComplexityGroup, TargetFunction
from streamline.domain.ranking import is_positive
from streamline.domain.store import FunctionStore


def select_targets(store: FunctionStore, groups: Dict[int, ComplexityGroup]) -> List[TargetFunction]:
    """Walk groups by ascending index and keep the first ranked member scoring > 0."""
    targets: List[TargetFunction] = []
    for index in sorted(groups):
        for address in groups[index].functions:
            function = store.get(address)
            if function is None or not is_positive(function.vulnerability_score):
                continue
            targets.append(TargetFunction(
                function.address,
                function.name,
                function.complexity_index,
                function.vulnerability_score,
            ))
            break
    return targets
