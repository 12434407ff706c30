"""Run the selection pipeline against a real radare2 install (no fakes).
Usage: python scripts/r2_real_tests.py <binary>
"""
import sys

from streamline.application.pipeline import TargetSelector
from streamline.infrastructure.radare2.backend import Radare2Backend
from streamline.infrastructure.sensitive_table import load_sensitive_functions

binary = sys.argv[1]
selector = TargetSelector(Radare2Backend(binary, {}), load_sensitive_functions())
targets = selector.run()

print("[r2 Real Tests] Binary:", binary)

# Every call target must have a record
for record in selector.store:
    for call in record.calls:
        assert call in selector.store, f"Missing record for call target 0x{call:x}"

# Call-in counts add up to the ingested call edges
assert sum(f.call_in_count for f in selector.store) == selector.store.call_edges

# One target per class, ascending, positive score
indexes = [t.complexity_index for t in targets]
assert indexes == sorted(set(indexes)), "Targets not strictly ascending by complexity index"
assert all(t.vulnerability_score > 0 for t in targets), "Non-positive target score"

print(f"[r2 Real Tests] OK: {len(selector.store)} records, {len(targets)} targets")
