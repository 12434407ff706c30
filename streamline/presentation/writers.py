"""Result persistence for selected target functions."""

import csv
import json
import os
import time
from typing import Any, Dict, List, Optional

from streamline.domain.entities import TargetFunction
from streamline.presentation.logger import info


class TargetWriter:
    def __init__(self, config):
        self.config = config

    def save_results(self, targets: List[TargetFunction], firmware_path: str,
                     statistics: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """Write JSON, CSV and the details report; return the paths written."""
        base_dir = os.path.dirname(os.path.abspath(firmware_path))
        mode = self.config.get("general.output_name_mode", "firmware")
        written = {}

        json_path = self._resolve_output_path(self.config.get("general.output_file"), base_dir, mode)
        if json_path:
            self._write_json(targets, json_path)
            written["json"] = json_path

        csv_path = self._resolve_output_path(self.config.get("general.csv_output_file"), base_dir, mode)
        if csv_path:
            self._write_csv(targets, csv_path)
            written["csv"] = csv_path

        details_path = self._resolve_output_path(self.config.get("general.details_output_file"), base_dir, mode)
        if details_path:
            self._write_details(targets, details_path, firmware_path, statistics or {})
            written["details"] = details_path
        return written

    def resolve(self, name: Optional[str], firmware_path: str) -> str:
        base_dir = os.path.dirname(os.path.abspath(firmware_path))
        return self._resolve_output_path(name, base_dir, self.config.get("general.output_name_mode", "firmware"))

    def _resolve_output_path(self, name: Optional[str], base_dir: str, mode: str) -> str:
        if not name:
            return ""
        if os.path.isabs(name) or os.path.dirname(name):
            return name
        if mode == "firmware":
            return os.path.join(base_dir, name)
        return name

    def _write_json(self, targets: List[TargetFunction], path: str):
        payload = [target.as_dict() for target in targets]
        with open(path, "w", encoding="utf-8") as f_json:
            json.dump(payload, f_json, indent=2)
        info(f"JSON written to: {path}")

    def _write_csv(self, targets: List[TargetFunction], path: str):
        with open(path, "w", newline="", encoding="utf-8") as f_csv:
            writer = csv.writer(f_csv)
            writer.writerow(["address", "name", "complexity_index", "vulnerability_score"])
            for target in targets:
                writer.writerow([
                    f"0x{target.address:x}",
                    target.name,
                    target.complexity_index,
                    f"{target.vulnerability_score:.4f}",
                ])
        info(f"CSV written to: {path}")

    def _write_details(self, targets: List[TargetFunction], path: str, firmware_path: str,
                       statistics: Dict[str, Any]):
        with open(path, "w", encoding="utf-8") as f_det:
            f_det.write("# Streamline - Fuzzing Target Selection Results\n")
            f_det.write(f"# Firmware: {os.path.basename(firmware_path)}\n")
            f_det.write(f"# Generated: {time.strftime('%Y-%m-%d %H:%M:%S')}\n")
            if statistics:
                f_det.write(f"# Backend: {statistics.get('backend', '')}\n")
                f_det.write(f"# Functions analyzed: {statistics.get('functions', 0)}\n")
                f_det.write(f"# Complexity groups: {statistics.get('groups', 0)}\n")
            f_det.write(f"# Total targets: {len(targets)}\n")
            f_det.write("#\n")
            f_det.write("# Format: address # name (complexity index, vulnerability score)\n")
            f_det.write("#\n\n")
            for target in targets:
                f_det.write(
                    f"0x{target.address:x} # {target.name or '<unnamed>'} "
                    f"(complex {target.complexity_index}, score {target.vulnerability_score:.4f})\n"
                )
        info(f"Detailed report written to: {path}")
