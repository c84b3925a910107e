import unittest
from ..utilities import RangeRegistry


class RangeRegistryTester(unittest.TestCase):

    def test_empty(self):
        registry = RangeRegistry()
        self.assertEqual(len(registry), 0)
        self.assertEqual(registry.overlap_size(1, 100), 0)

    def test_single(self):
        registry = RangeRegistry()
        registry.check_and_register(10, 20)
        self.assertEqual(list(registry), [(10, 20)])
        self.assertEqual(registry.overlap_size(10, 20), 11)
        self.assertEqual(registry.overlap_size(15, 30), 6)
        self.assertEqual(registry.overlap_size(1, 10), 1)
        self.assertEqual(registry.overlap_size(21, 30), 0)

    def test_merge_overlapping(self):
        registry = RangeRegistry()
        registry.check_and_register(10, 20)
        registry.check_and_register(15, 30)
        self.assertEqual(list(registry), [(10, 30)])
        # Bases are never counted twice
        self.assertEqual(registry.overlap_size(1, 100), 21)

    def test_merge_adjacent(self):
        registry = RangeRegistry()
        registry.check_and_register(10, 20)
        registry.check_and_register(21, 30)
        self.assertEqual(list(registry), [(10, 30)])

    def test_disjoint(self):
        registry = RangeRegistry()
        registry.check_and_register(50, 60)
        registry.check_and_register(10, 20)
        self.assertEqual(list(registry), [(10, 20), (50, 60)])
        self.assertEqual(registry.overlap_size(15, 55), 12)

    def test_containment(self):
        registry = RangeRegistry()
        registry.check_and_register(10, 100)
        registry.check_and_register(20, 30)
        self.assertEqual(list(registry), [(10, 100)])

    def test_single_base(self):
        registry = RangeRegistry()
        registry.check_and_register(5, 5)
        self.assertEqual(registry.overlap_size(5, 5), 1)
        self.assertEqual(registry.overlap_size(1, 4), 0)

    def test_invalid(self):
        registry = RangeRegistry()
        with self.assertRaises(ValueError):
            registry.check_and_register(20, 10)
        with self.assertRaises(ValueError):
            registry.overlap_size(20, 10)


if __name__ == "__main__":
    unittest.main()
