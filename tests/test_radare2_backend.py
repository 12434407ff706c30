import json
import os
import tempfile
import unittest

from streamline.domain.entities import Operation, Reference
from streamline.domain.errors import IngestionError
from streamline.infrastructure.radare2.backend import Radare2Backend
from tests.fixtures.fake_r2pipe import FakePipe

MAIN, MEMCPY = 0x1000, 0x2000

FUNCTIONS = [
    {"name": "main", "offset": MAIN, "size": 0x20, "cc": 3, "nbbs": 4},
    {"name": "sym.imp.memcpy", "offset": MEMCPY, "size": 8, "cc": 1},
]
REFERENCES = {
    MAIN: [
        {"type": "CALL", "from": MAIN + 4, "to": MEMCPY},
        {"type": "DATA", "from": MAIN + 8, "to": 0x8000},
    ],
}
OPERATIONS = {
    MAIN: [
        {"addr": MAIN, "type": "load"},
        {"addr": MAIN + 4, "type": "call"},
        {"addr": MAIN + 0x20, "type": "store"},
    ],
    MEMCPY: [{"addr": MEMCPY, "type": "jmp"}],
}


class Radare2BackendTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.firmware = os.path.join(self._tmp.name, "firmware.bin")
        with open(self.firmware, "wb") as f:
            f.write(b"\x00" * 64)

    def tearDown(self):
        self._tmp.cleanup()

    def _backend(self, pipe, config=None):
        return Radare2Backend(self.firmware, config or {}, pipe=pipe)

    def test_extracts_function_facts(self):
        pipe = FakePipe(FUNCTIONS, REFERENCES, OPERATIONS)
        with self._backend(pipe) as backend:
            facts = list(backend.iter_functions())
        self.assertTrue(pipe.closed)
        self.assertEqual([f.name for f in facts], ["main", "sym.imp.memcpy"])
        self.assertEqual(facts[0].references, (Reference("CALL", MEMCPY), Reference("DATA", 0x8000)))
        # operations past offset + size belong to the next function
        self.assertEqual(facts[0].operations, (Operation(MAIN, "load"), Operation(MAIN + 4, "call")))
        self.assertEqual(pipe.commands[:3], ["aaa", "aflj", f"s {MAIN}"])
        self.assertIn("aOj 32", pipe.commands)

    def test_range_filter_can_be_disabled(self):
        pipe = FakePipe(FUNCTIONS, REFERENCES, OPERATIONS)
        with self._backend(pipe, {"restrict_operations_to_range": False}) as backend:
            facts = list(backend.iter_functions())
        self.assertEqual(len(facts[0].operations), 3)

    def test_custom_analysis_command(self):
        pipe = FakePipe(FUNCTIONS, overrides={"aa": ""})
        with self._backend(pipe, {"analysis_command": "aa"}) as backend:
            list(backend.iter_functions())
        self.assertEqual(pipe.commands[0], "aa")

    def test_unparsable_listing(self):
        pipe = FakePipe(FUNCTIONS, overrides={"aflj": "not json"})
        with self._backend(pipe) as backend:
            with self.assertRaises(IngestionError) as ctx:
                list(backend.iter_functions())
        self.assertIn("'aflj'", str(ctx.exception))

    def test_failing_command(self):
        pipe = FakePipe(FUNCTIONS, overrides={"afxj": BrokenPipeError("pipe closed")})
        with self._backend(pipe) as backend:
            with self.assertRaises(IngestionError) as ctx:
                list(backend.iter_functions())
        self.assertIn("'afxj'", str(ctx.exception))

    def test_malformed_reference(self):
        pipe = FakePipe(FUNCTIONS, references={MAIN: [{"type": "CALL"}]})
        with self._backend(pipe) as backend:
            with self.assertRaises(IngestionError):
                list(backend.iter_functions())

    def test_listing_must_be_list(self):
        pipe = FakePipe(FUNCTIONS, overrides={"aflj": json.dumps({"name": "main"})})
        with self._backend(pipe) as backend:
            with self.assertRaises(IngestionError):
                list(backend.iter_functions())

    def test_missing_firmware(self):
        backend = Radare2Backend(os.path.join(self._tmp.name, "missing.bin"), {}, pipe=FakePipe([]))
        with self.assertRaises(IngestionError) as ctx:
            backend.open()
        self.assertIn("firmware", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
