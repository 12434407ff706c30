"""Record an ingestion feed so a run can be replayed with FeedBackend."""

import json
from typing import Iterable, Optional

from streamline.domain.entities import FunctionFacts


def write_feed(path: str, functions: Iterable[FunctionFacts], source: Optional[str] = None):
    document = {
        "source": source,
        "functions": [facts.as_dict() for facts in functions],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2)
