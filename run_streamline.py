#!/usr/bin/env python3
"""
Streamline - fuzzing target selection for monolithic firmware
Main orchestrator: ingest a firmware image, rank its functions and export
one target per complexity class.
"""

import sys
import time
from typing import List, Optional

from streamline.application.config import Config
from streamline.application.pipeline import TargetSelector
from streamline.application.registry import build_backend
from streamline.domain.entities import TargetFunction
from streamline.domain.errors import StreamlineError
from streamline.infrastructure.feed.recorder import write_feed
from streamline.infrastructure.sensitive_table import load_sensitive_functions
from streamline.presentation import logger
from streamline.presentation.cli import format_statistics, format_targets, parse_args
from streamline.presentation.writers import TargetWriter


class Streamline:
    """Main Streamline orchestrator"""

    def __init__(self, config_file: str = None):
        self.config = Config(config_file)
        logger.configure(self.config.get("general.log_file"), self.config.get("general.log_level", "info"))
        self.writer = TargetWriter(self.config)
        self.selector: Optional[TargetSelector] = None
        self.start_time = None
        self.end_time = None

    def analyze(self, firmware: str) -> List[TargetFunction]:
        """Run the whole pipeline for one firmware image and persist the targets."""
        self.start_time = time.time()
        logger.info(f"Analyzing firmware: {firmware}")

        table = load_sensitive_functions(self.config.get("analysis.sensitive_functions_file"))
        logger.info(f"Loaded {len(table)} sensitive functions")

        backend_name = self.config.get("analysis.backend", "radare2")
        backend = build_backend(backend_name, firmware, self.config.get("backends", {}))
        self.selector = TargetSelector(backend, table, self.config.get("analysis", {}))
        targets = self.selector.run()

        feed_file = self.writer.resolve(self.config.get("general.feed_output_file"), firmware)
        if feed_file:
            write_feed(feed_file, self.selector.feed, source=firmware)
            logger.info(f"Ingestion feed written to: {feed_file}")
        self.writer.save_results(targets, firmware, self.selector.get_statistics())

        self.end_time = time.time()
        self._print_statistics(targets)
        return targets

    def _print_statistics(self, targets: List[TargetFunction]):
        if not self.selector or not self.start_time or not self.end_time:
            return
        print(format_targets(targets))
        print(format_statistics(self.selector.get_statistics(), self.end_time - self.start_time))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)

    phase = "configuration"
    try:
        streamline = Streamline(config_file=args.config)
        config = streamline.config
        if args.log_level or args.log_file:
            logger.configure(
                args.log_file or config.get("general.log_file"),
                args.log_level or config.get("general.log_level", "info"),
            )
        if args.sensitive_functions:
            config.set("analysis.sensitive_functions_file", args.sensitive_functions)
        if args.backend:
            config.set("analysis.backend", args.backend)
        if args.feed:
            config.set("analysis.backend", "feed")
            config.set("backends.feed.feed_file", args.feed)
        if args.output:
            config.set("general.output_file", args.output)
        if args.dump_feed:
            config.set("general.feed_output_file", args.dump_feed)

        if args.command == "analyze":
            phase = "analysis"
            streamline.analyze(args.firmware)
    except StreamlineError as exc:
        logger.error(f"Error during {phase}: {exc}")
        return 1
    except OSError as exc:
        logger.error(f"Error writing results: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
