"""Replay backend for a recorded JSON ingestion feed."""

import json
import os
from typing import Any, Dict, Iterator

from streamline.domain.backend import AnalysisBackend
from streamline.domain.entities import FunctionFacts
from streamline.domain.errors import IngestionError


class FeedBackend(AnalysisBackend):
    """Read ``{"functions": [...]}`` written by ``write_feed`` (or by hand).

    ``feed_file`` from the backend config takes precedence; otherwise the
    analysis input itself is the feed.
    """

    def __init__(self, firmware: str, config: Dict[str, Any] = None):
        super().__init__(config)
        self.feed_file = self.config.get("feed_file") or firmware
        self._functions = None

    def get_name(self) -> str:
        return "feed"

    def open(self):
        if not self.feed_file or not os.path.isfile(self.feed_file):
            raise IngestionError(f"Feed file does not exist or is not a file: {self.feed_file}")
        try:
            with open(self.feed_file, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as exc:
            raise IngestionError(f"Parsing feed file {self.feed_file} failed: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get("functions"), list):
            raise IngestionError(f"Feed file {self.feed_file} has no 'functions' list")
        self._functions = document["functions"]

    def close(self):
        self._functions = None

    def iter_functions(self) -> Iterator[FunctionFacts]:
        if self._functions is None:
            raise IngestionError("Feed backend is not open")
        for entry in self._functions:
            yield FunctionFacts.from_dict(entry)
