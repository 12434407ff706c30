"""Application layer: target selection orchestration (engine-agnostic)."""

from typing import Any, Dict, List, Optional

from streamline.domain.backend import AnalysisBackend
from streamline.domain.complexity import complexity_grouping
from streamline.domain.entities import ComplexityGroup, FunctionFacts, TargetFunction
from streamline.domain.memory import MEMORY_OPERATION_TYPES
from streamline.domain.ranking import vulnerability_feature_ranking
from streamline.domain.selection import select_targets
from streamline.domain.sensitivity import DEFAULT_NAMESPACE_SEPARATOR, SensitiveFunctionTable
from streamline.domain.store import DEFAULT_CALL_REFERENCE_TYPES, FunctionStore
from streamline.presentation.logger import debug, info


class TargetSelector:
    """Runs ingestion, complexity grouping and ranking for one backend.

    A selector is single use: every run builds a fresh store and groups.
    """

    def __init__(self, backend: AnalysisBackend, sensitive_functions: SensitiveFunctionTable,
                 config: Dict[str, Any] = None):
        self.backend = backend
        self.sensitive_functions = sensitive_functions
        self.config = config or {}
        self.separator = self.config.get("namespace_separator") or DEFAULT_NAMESPACE_SEPARATOR
        self.call_reference_types = tuple(self.config.get("call_reference_types") or DEFAULT_CALL_REFERENCE_TYPES)
        self.memory_operation_types = tuple(self.config.get("memory_operation_types") or MEMORY_OPERATION_TYPES)
        self.store = FunctionStore(self.call_reference_types)
        self.groups: Dict[int, ComplexityGroup] = {}
        self.feed: List[FunctionFacts] = []
        self.targets: Optional[List[TargetFunction]] = None

    def _ingest(self):
        with self.backend:
            for facts in self.backend.iter_functions():
                debug(f"Ingesting {facts.name or hex(facts.offset)} at 0x{facts.offset:x}")
                self.store.ingest(facts)
                self.feed.append(facts)
        info(
            f"Ingested {self.store.defined} functions from {self.backend.get_name()} "
            f"({len(self.store)} records, {self.store.call_edges} call edges)"
        )

    def analyze(self):
        self._ingest()
        self.groups = complexity_grouping(self.store)
        info(f"Formed {len(self.groups)} complexity groups")
        vulnerability_feature_ranking(
            self.store,
            self.groups,
            self.sensitive_functions,
            self.separator,
            self.memory_operation_types,
        )

    def export(self) -> List[TargetFunction]:
        self.targets = select_targets(self.store, self.groups)
        info(f"Selected {len(self.targets)} target functions")
        return self.targets

    def run(self) -> List[TargetFunction]:
        self.analyze()
        return self.export()

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "backend": self.backend.get_name(),
            "functions": self.store.defined,
            "records": len(self.store),
            "call_edges": self.store.call_edges,
            "groups": len(self.groups),
            "excluded": sum(1 for f in self.store if f.complexity_index == 0),
            "targets": len(self.targets or []),
        }
