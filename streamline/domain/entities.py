"""Domain entities for Streamline (engine-agnostic)."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from streamline.domain.errors import IngestionError


@dataclass(frozen=True)
class Reference:
    """Outgoing reference reported by the engine for one function."""

    ref_type: str
    target: int

    def as_dict(self) -> Dict[str, Any]:
        return {"type": self.ref_type, "to": self.target}


@dataclass(frozen=True)
class Operation:
    """One decoded instruction inside a function's address range."""

    address: int
    op_type: str

    def as_dict(self) -> Dict[str, Any]:
        return {"addr": self.address, "type": self.op_type}


def _require_int(data: Dict[str, Any], keys: Sequence[str], what: str) -> int:
    for key in keys:
        if key in data:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise IngestionError(f"Malformed {what}: '{key}' must be a non-negative integer, got {value!r}")
            return value
    raise IngestionError(f"Malformed {what}: missing '{keys[0]}'")


def _require_str(data: Dict[str, Any], key: str, what: str) -> str:
    if key not in data:
        raise IngestionError(f"Malformed {what}: missing '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise IngestionError(f"Malformed {what}: '{key}' must be a string, got {value!r}")
    return value


def _require_list(raw: Any, what: str) -> List[Any]:
    if not isinstance(raw, list):
        raise IngestionError(f"Malformed {what}: expected a list, got {type(raw).__name__}")
    return raw


def parse_references(raw: Any) -> Tuple[Reference, ...]:
    """Parse an engine reference listing (e.g. radare2 ``afxj``)."""
    refs = []
    for entry in _require_list(raw, "reference list"):
        if not isinstance(entry, dict):
            raise IngestionError(f"Malformed reference: expected an object, got {entry!r}")
        refs.append(Reference(_require_str(entry, "type", "reference"), _require_int(entry, ("to",), "reference")))
    return tuple(refs)


def parse_operations(raw: Any) -> Tuple[Operation, ...]:
    """Parse an engine operation listing (e.g. radare2 ``aOj``)."""
    ops = []
    for entry in _require_list(raw, "operation list"):
        if not isinstance(entry, dict):
            raise IngestionError(f"Malformed operation: expected an object, got {entry!r}")
        # radare2 reports the instruction address as "addr" (newer) or "offset" (older)
        ops.append(Operation(_require_int(entry, ("addr", "offset"), "operation"), _require_str(entry, "type", "operation")))
    return tuple(ops)


@dataclass(frozen=True)
class FunctionFacts:
    """Raw per-function facts supplied by an analysis backend."""

    offset: int
    name: str
    size: int
    cc: int
    references: Tuple[Reference, ...] = ()
    operations: Tuple[Operation, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "FunctionFacts":
        """Strictly parse one feed record; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise IngestionError(f"Malformed function record: expected an object, got {data!r}")
        return cls(
            offset=_require_int(data, ("offset", "addr"), "function record"),
            name=_require_str(data, "name", "function record"),
            size=_require_int(data, ("size",), "function record"),
            cc=_require_int(data, ("cc",), "function record"),
            references=parse_references(data.get("references", [])),
            operations=parse_operations(data.get("operations", [])),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "offset": self.offset,
            "size": self.size,
            "cc": self.cc,
            "references": [ref.as_dict() for ref in self.references],
            "operations": [op.as_dict() for op in self.operations],
        }


@dataclass
class FunctionRecord:
    """Per-address state shared by all pipeline stages.

    ``memory_density`` and ``vulnerability_score`` stay ``None`` when the
    function has no recorded operations.
    """

    address: int
    name: str = ""
    size: int = 0
    cc: int = 0
    calls: List[int] = field(default_factory=list)
    callers: List[int] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)
    call_in_count: int = 0
    complexity_index: int = 0
    sensitivity_score: float = 0.0
    memory_density: Optional[float] = None
    vulnerability_score: Optional[float] = None

    def define(self, facts: FunctionFacts, calls: Iterable[int]):
        self.name = facts.name
        self.size = facts.size
        self.cc = facts.cc
        self.calls.extend(calls)
        self.operations.extend(facts.operations)


@dataclass
class ComplexityGroup:
    complexity_index: int
    functions: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class TargetFunction:
    address: int
    name: str
    complexity_index: int
    vulnerability_score: float

    def as_tuple(self):
        return (self.address, self.name, self.complexity_index, self.vulnerability_score)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "address": f"0x{self.address:x}",
            "name": self.name,
            "complexity_index": self.complexity_index,
            "vulnerability_score": self.vulnerability_score,
        }
