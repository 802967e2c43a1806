import unittest
from pathlib import Path

# Add src to path to import modules
import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent / "src"))

from search.stopping import net_energy_change, should_stop
from utils.constants import HISTORY_SIZE


class TestStoppingCriterion(unittest.TestCase):

    def test_strictly_decreasing_window_does_not_stop(self):
        history = [1000.0 - k for k in range(HISTORY_SIZE)]
        self.assertLess(net_energy_change(history), 0)
        self.assertFalse(should_stop(history))

    def test_oscillation_returning_to_start_stops(self):
        # Deltas +2, -1, -1 repeat, so the window's differences sum to zero
        history = [10.0 + [0, 2, 1][k % 3] for k in range(HISTORY_SIZE)]
        self.assertEqual(history[0], history[-1])
        self.assertTrue(should_stop(history))

    def test_alternating_window_with_net_drift_does_not_stop(self):
        # sum(h[k+1] - h[k]) telescopes to h[-1] - h[0]: 100 alternating energies leave 99 differences netting to +1
        history = [10.0 + (k % 2) for k in range(HISTORY_SIZE)]
        self.assertFalse(should_stop(history))

    def test_flat_window_stops(self):
        self.assertTrue(should_stop([42.5] * HISTORY_SIZE))

    def test_short_window_never_stops(self):
        self.assertFalse(should_stop([42.5] * (HISTORY_SIZE - 1)))
        self.assertFalse(should_stop([]))
        self.assertFalse(should_stop([1.0]))

    def test_only_most_recent_window_counts(self):
        history = [500.0] + [42.5] * HISTORY_SIZE
        self.assertTrue(should_stop(history))

    def test_custom_window(self):
        self.assertTrue(should_stop([3.0, 4.0, 3.0], window=3))
        self.assertFalse(should_stop([3.0, 4.0], window=3))

    def test_closed_loop_of_floats_is_exactly_zero(self):
        """Energies revisiting the start give 0.0 without rounding residue."""
        loop = [812.3471, 809.1, 815.0000001, 0.1 + 0.2, 777.77]
        history = (loop * 20)[:HISTORY_SIZE - 1] + [loop[0]]
        self.assertEqual(net_energy_change(history), 0.0)
        self.assertTrue(should_stop(history))


if __name__ == '__main__':
    unittest.main()
