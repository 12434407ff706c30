"""Function record store built from a backend's ingestion feed."""

from typing import Dict, Iterable, Iterator, Optional

from streamline.domain.entities import FunctionFacts, FunctionRecord

DEFAULT_CALL_REFERENCE_TYPES = ("CALL",)


class FunctionStore:
    """One FunctionRecord per address, created on first sighting.

    Records are never removed. Every address appearing in a ``calls`` list has
    a record, even before (or without) its own definition being ingested.
    """

    def __init__(self, call_reference_types: Iterable[str] = DEFAULT_CALL_REFERENCE_TYPES):
        self.call_reference_types = frozenset(call_reference_types)
        self._functions: Dict[int, FunctionRecord] = {}
        self.defined = 0
        self.call_edges = 0

    def __len__(self) -> int:
        return len(self._functions)

    def __contains__(self, address: int) -> bool:
        return address in self._functions

    def __getitem__(self, address: int) -> FunctionRecord:
        return self._functions[address]

    def __iter__(self) -> Iterator[FunctionRecord]:
        return iter(self._functions.values())

    def get(self, address: int) -> Optional[FunctionRecord]:
        return self._functions.get(address)

    def get_or_create(self, address: int) -> FunctionRecord:
        record = self._functions.get(address)
        if record is None:
            record = FunctionRecord(address)
            self._functions[address] = record
        return record

    def ingest(self, facts: FunctionFacts) -> FunctionRecord:
        """Add one function definition and its outgoing call edges."""
        record = self.get_or_create(facts.offset)
        calls = []
        for ref in facts.references:
            if ref.ref_type not in self.call_reference_types:
                continue
            calls.append(ref.target)
            self.get_or_create(ref.target).callers.append(facts.offset)
        record.define(facts, calls)
        self.defined += 1
        self.call_edges += len(calls)
        return record

    def ingest_all(self, feed: Iterable[FunctionFacts]) -> int:
        count = 0
        for facts in feed:
            self.ingest(facts)
            count += 1
        return count
