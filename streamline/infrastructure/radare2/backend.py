"""radare2 analysis backend (driven through r2pipe)."""

import dataclasses
import json
import os
from typing import Any, Dict, Iterator

import r2pipe

from streamline.domain.backend import AnalysisBackend
from streamline.domain.entities import FunctionFacts, parse_operations, parse_references
from streamline.domain.errors import IngestionError
from streamline.presentation.logger import debug, info


class Radare2Backend(AnalysisBackend):
    """Extract function facts from a firmware image with radare2.

    Commands used per run: the analysis command (``aaa``), ``aflj`` to list
    functions, then per function ``s <offset>``, ``afxj`` for references and
    ``aOj <size>`` for operations. Every command is synchronous.
    """

    def __init__(self, firmware: str, config: Dict[str, Any] = None, pipe=None):
        super().__init__(config)
        self.firmware = firmware
        self.analysis_command = self.config.get("analysis_command", "aaa")
        self.restrict_operations_to_range = bool(self.config.get("restrict_operations_to_range", True))
        self._pipe = pipe

    def get_name(self) -> str:
        return "radare2"

    def open(self):
        if not self.firmware or not os.path.isfile(self.firmware):
            raise IngestionError("Path of firmware file does not exist or is not a file")
        if self._pipe is not None:
            return
        try:
            self._pipe = r2pipe.open(self.firmware, flags=["-2"])
        except Exception as exc:
            raise IngestionError(f"Could not open radare2 pipe: {exc}") from exc

    def close(self):
        if self._pipe is None:
            return
        try:
            self._pipe.quit()
        finally:
            self._pipe = None

    def _cmd(self, command: str) -> str:
        if self._pipe is None:
            raise IngestionError("radare2 pipe is not open")
        try:
            output = self._pipe.cmd(command)
        except Exception as exc:
            raise IngestionError(f"Command '{command}' failed: {exc}") from exc
        if output is None:
            raise IngestionError(f"Command '{command}' failed: no output")
        return output

    def _cmdj(self, command: str) -> Any:
        name = command.split()[0]
        output = self._cmd(command)
        try:
            return json.loads(output)
        except ValueError as exc:
            raise IngestionError(f"Parsing output of command '{name}' failed: {exc}") from exc

    def iter_functions(self) -> Iterator[FunctionFacts]:
        self._cmd(self.analysis_command)
        info("Functions analyzed. Extracting data...")
        listing = self._cmdj("aflj")
        if not isinstance(listing, list):
            raise IngestionError("Parsing output of command 'aflj' failed: expected a list")
        for entry in listing:
            header = FunctionFacts.from_dict(entry)
            self._cmd(f"s {header.offset}")
            debug(f"Extracting data of {header.name}")
            references = parse_references(self._cmdj("afxj"))
            operations = parse_operations(self._cmdj(f"aOj {header.size}"))
            if self.restrict_operations_to_range:
                end = header.offset + header.size
                operations = tuple(op for op in operations if header.offset <= op.address < end)
            yield dataclasses.replace(header, references=references, operations=operations)
