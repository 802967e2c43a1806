import math
import unittest
from pathlib import Path

import numpy as np

# Add src to path to import modules
import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent / "src"))

from lm_models.bigram_model import estimate, load_bigram_model, save_model
from utils.alphabet import InvalidAlphabetSymbolError, encode
from utils.constants import ALPHABET_SIZE, DEFAULT_CORPUS_FILE
from utils.load_cipher import load_corpus


class TestSmoothing(unittest.TestCase):
    """Every probability must stay strictly positive, whatever the corpus."""

    def test_empty_corpus_gives_uniform_model(self):
        with self.assertLogs("lm_models.bigram_model", level="WARNING"):
            model = estimate([])
        np.testing.assert_allclose(model.P, np.full(ALPHABET_SIZE, 1 / ALPHABET_SIZE))
        np.testing.assert_allclose(model.Q, np.full((ALPHABET_SIZE, ALPHABET_SIZE), 1 / ALPHABET_SIZE))

    def test_single_symbol_corpus_is_smoothing_only(self):
        with self.assertLogs("lm_models.bigram_model", level="WARNING"):
            model = estimate([3])
        self.assertEqual(model.num_bigrams, 0)
        np.testing.assert_allclose(model.P, np.full(ALPHABET_SIZE, 1 / ALPHABET_SIZE))

    def test_all_entries_positive(self):
        model = estimate(encode("aaaa aaaa"))
        self.assertTrue((model.P > 0).all())
        self.assertTrue((model.Q > 0).all())
        self.assertTrue(np.isfinite(model.log_q).all())


class TestEstimation(unittest.TestCase):

    def setUp(self):
        # a b a b: bigrams (a,b) twice and (b,a) once
        self.model = estimate([0, 1, 0, 1])

    def test_counts_include_laplace_prior(self):
        self.assertEqual(self.model.counts[0, 1], 3)
        self.assertEqual(self.model.counts[1, 0], 2)
        self.assertEqual(self.model.counts[2, 2], 1)
        self.assertEqual(self.model.num_bigrams, 3)

    def test_q_is_row_stochastic(self):
        np.testing.assert_allclose(self.model.Q.sum(axis=1), np.ones(ALPHABET_SIZE))
        self.assertAlmostEqual(self.model.Q[0, 1], 3 / 29)
        self.assertAlmostEqual(self.model.Q[1, 0], 2 / 28)

    def test_p_is_a_distribution_over_predecessors(self):
        total = ALPHABET_SIZE * ALPHABET_SIZE + 3
        self.assertAlmostEqual(self.model.P.sum(), 1.0)
        self.assertAlmostEqual(self.model.P[0], 29 / total)
        self.assertAlmostEqual(self.model.P[1], 28 / total)
        self.assertAlmostEqual(self.model.P[5], 27 / total)

    def test_estimation_is_deterministic(self):
        again = estimate([0, 1, 0, 1])
        np.testing.assert_array_equal(again.P, self.model.P)
        np.testing.assert_array_equal(again.Q, self.model.Q)

    def test_invalid_symbol_rejected(self):
        with self.assertRaises(InvalidAlphabetSymbolError):
            estimate([0, 1, 27])


class TestScoring(unittest.TestCase):

    def test_log_score_text(self):
        model = estimate(encode("the cat sat on the mat"))
        x = encode("the")
        expected = math.log(model.P[x[0]]) + math.log(model.Q[x[0], x[1]]) + math.log(model.Q[x[1], x[2]])
        self.assertAlmostEqual(model.log_score_text("the"), expected)

    def test_english_prefers_common_pairs(self):
        model = estimate(load_corpus(DEFAULT_CORPUS_FILE))
        t, h, q = encode("thq")
        self.assertGreater(model.Q[t, h], model.Q[t, q])
        self.assertGreater(model.log_score_text("the house"), model.log_score_text("qzx jvkwp"))


class TestPersistence(unittest.TestCase):

    def test_save_and_load(self):
        import tempfile
        model = estimate(encode("to be or not to be"))
        with tempfile.TemporaryDirectory() as tmp:
            path = save_model(model, str(Path(tmp) / "models" / "bigram.pkl"))
            loaded = load_bigram_model(path)
        np.testing.assert_array_equal(loaded.Q, model.Q)
        np.testing.assert_array_equal(loaded.P, model.P)

    def test_missing_model_file(self):
        with self.assertRaises(FileNotFoundError):
            load_bigram_model("does/not/exist.pkl")


if __name__ == '__main__':
    unittest.main()
