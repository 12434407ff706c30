import unittest

from streamline.domain.complexity import complexity_grouping
from streamline.domain.entities import FunctionFacts
from streamline.domain.ranking import vulnerability_feature_ranking
from streamline.domain.selection import select_targets
from streamline.domain.sensitivity import SensitiveFunctionTable
from streamline.domain.store import FunctionStore
from tests.fixtures.feeds import A, B, C, CHAIN_FEED, function


def run_pipeline(feed, weights=None):
    store = FunctionStore()
    store.ingest_all(FunctionFacts.from_dict(entry) for entry in feed)
    groups = complexity_grouping(store)
    vulnerability_feature_ranking(store, groups, SensitiveFunctionTable(weights or {}))
    return store, groups, select_targets(store, groups)


MIXED_FEED = [
    function(0x100, "sym.parse_packet", 40, calls=[0x900, 0x900, 0x200], ops=["load", "add", "store", "cmp"]),
    function(0x200, "sym.checksum", 12, calls=[0x900], ops=["load", "load", "xor"]),
    function(0x300, "sym.dispatch", 3000, calls=[0x100, 0x200, 0x800], ops=["call", "call"]),
    function(0x400, "sym.init", 1, ops=["mov"]),
    function(0x500, "sym.empty", 90),
    function(0x800, "sym.log", 9, ops=["store", "store"]),
    function(0x900, "sym.imp.memcpy", 1),
]


class SelectionTests(unittest.TestCase):
    def test_chain_scenario(self):
        store, groups, targets = run_pipeline(CHAIN_FEED)
        self.assertEqual(groups[1].functions, [B, A])
        self.assertEqual(groups[3].functions, [C])
        self.assertIsNone(store[C].vulnerability_score)
        self.assertEqual(len(targets), 1)
        self.assertEqual(targets[0].address, B)
        self.assertEqual(targets[0].name, "sym.func_b")
        self.assertEqual(targets[0].complexity_index, 1)
        self.assertAlmostEqual(targets[0].vulnerability_score, 2 / 3)

    def test_one_target_per_class_ascending(self):
        _, groups, targets = run_pipeline(MIXED_FEED, {"memcpy": 2.0})
        indexes = [t.complexity_index for t in targets]
        self.assertEqual(indexes, sorted(set(indexes)))
        self.assertLessEqual(len(targets), len(groups))
        for target in targets:
            self.assertGreater(target.vulnerability_score, 0)

    def test_sensitive_caller_wins_its_class(self):
        store, groups, targets = run_pipeline(MIXED_FEED, {"memcpy": 2.0})
        self.assertEqual(store[0x100].sensitivity_score, 4.0)
        self.assertEqual(store[0x100].complexity_index, 4)
        by_index = {t.complexity_index: t for t in targets}
        self.assertEqual(by_index[4].address, 0x100)
        self.assertAlmostEqual(by_index[4].vulnerability_score, 4.5)

    def test_index_zero_never_exported(self):
        store, groups, targets = run_pipeline(MIXED_FEED, {"memcpy": 2.0})
        excluded = {f.address for f in store if f.complexity_index == 0}
        self.assertIn(0x400, excluded)
        for group in groups.values():
            self.assertFalse(excluded & set(group.functions))
        self.assertFalse(excluded & {t.address for t in targets})

    def test_zero_operation_functions_do_not_fail(self):
        store, _, targets = run_pipeline([function(A, "sym.lonely", 90)])
        self.assertIsNone(store[A].memory_density)
        self.assertIsNone(store[A].vulnerability_score)
        self.assertEqual(targets, [])

    def test_rerun_is_identical(self):
        first = run_pipeline(MIXED_FEED, {"memcpy": 2.0})[2]
        second = run_pipeline(MIXED_FEED, {"memcpy": 2.0})[2]
        self.assertEqual([t.as_tuple() for t in first], [t.as_tuple() for t in second])


if __name__ == "__main__":
    unittest.main()
