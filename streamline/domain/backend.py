"""Analysis backend abstraction (engine-agnostic)."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator

from streamline.domain.entities import FunctionFacts


class AnalysisBackend(ABC):
    """Base class for engines that supply the per-function ingestion feed.

    The scoring stages never depend on a concrete backend; they only consume
    the FunctionFacts yielded by ``iter_functions``.
    """

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}

    @abstractmethod
    def get_name(self) -> str:
        """Return backend name."""
        raise NotImplementedError

    @abstractmethod
    def iter_functions(self) -> Iterator[FunctionFacts]:
        """Yield one FunctionFacts per defined function; raise IngestionError on bad data."""
        raise NotImplementedError

    def open(self):
        """Acquire engine resources. Default: nothing to do."""

    def close(self):
        """Release engine resources. Default: nothing to do."""

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
