import unittest

from streamline.application.pipeline import TargetSelector
from streamline.domain.errors import IngestionError
from streamline.domain.sensitivity import SensitiveFunctionTable
from tests.fixtures.feeds import B, CHAIN_FEED, function
from tests.fixtures.mock_backend import InMemoryBackend


class TargetSelectorTests(unittest.TestCase):
    def test_run_chain_feed(self):
        backend = InMemoryBackend(config={"functions": CHAIN_FEED})
        selector = TargetSelector(backend, SensitiveFunctionTable({"strcpy": 3.0}))
        targets = selector.run()
        self.assertTrue(backend.opened)
        self.assertTrue(backend.closed)
        self.assertEqual([t.address for t in targets], [B])
        self.assertEqual(len(selector.feed), 3)
        stats = selector.get_statistics()
        self.assertEqual(stats["functions"], 3)
        self.assertEqual(stats["call_edges"], 2)
        self.assertEqual(stats["groups"], 2)
        self.assertEqual(stats["targets"], 1)

    def test_analysis_config_is_honoured(self):
        feed = [
            function(0x10, "main", 8, calls=[0x20], ops=["mov", "add"]),
            function(0x20, "libc::system", 1),
        ]
        backend = InMemoryBackend(config={"functions": feed})
        config = {"namespace_separator": "::", "memory_operation_types": ["mov"]}
        selector = TargetSelector(backend, SensitiveFunctionTable({"system": 3.0}), config)
        targets = selector.run()
        self.assertEqual(len(targets), 1)
        self.assertEqual(targets[0].address, 0x10)
        self.assertAlmostEqual(targets[0].vulnerability_score, 3.5)

    def test_malformed_feed_aborts_and_closes_backend(self):
        backend = InMemoryBackend(config={"functions": [function(0x10, "ok", 4), {"name": "broken"}]})
        selector = TargetSelector(backend, SensitiveFunctionTable({"strcpy": 3.0}))
        with self.assertRaises(IngestionError):
            selector.run()
        self.assertTrue(backend.closed)
        self.assertIsNone(selector.targets)


if __name__ == "__main__":
    unittest.main()
