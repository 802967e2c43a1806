import logging
import os
import pickle
from typing import Sequence

import numpy as np
from nltk.probability import ConditionalFreqDist
from nltk.util import bigrams

from utils.alphabet import encode, validate_symbols
from utils.constants import ALPHABET_SIZE

logger = logging.getLogger(__name__)


class BigramLanguageModel:
    """Stationary first-order Markov model of text over the 27-symbol alphabet.

    P is the marginal distribution of symbols and Q the row-stochastic
    transition matrix: Q[a, b] is the probability that symbol b follows
    symbol a. Both are estimated from Laplace-smoothed bigram counts, so every
    entry is strictly positive and log-likelihoods are always finite.
    """

    def __init__(self, counts: np.ndarray):
        """Build P and Q from a smoothed 27x27 bigram count matrix.

        Args:
            counts: Count matrix indexed as counts[previous, next]. Every
                    cell must already include the +1 smoothing count.
        """
        self.counts = counts
        total = counts.sum()
        row_totals = counts.sum(axis=1)

        self.P = row_totals / total
        self.Q = counts / row_totals[:, np.newaxis]
        self.log_p = np.log(self.P)
        self.log_q = np.log(self.Q)

    @property
    def num_bigrams(self) -> int:
        """Number of corpus bigrams the model has seen, smoothing excluded."""
        return int(self.counts.sum()) - ALPHABET_SIZE * ALPHABET_SIZE

    def log_score_symbols(self, symbols: Sequence[int]) -> float:
        """Log-likelihood of an index sequence: ln P[x0] + sum of ln Q[x_t, x_t+1]."""
        x = np.asarray(symbols, dtype=np.intp)
        if x.size == 0:
            return 0.0
        return float(self.log_p[x[0]] + self.log_q[x[:-1], x[1:]].sum())

    def log_score_text(self, text: str) -> float:
        """Calculates the TOTAL log probability of a cleaned plaintext string."""
        return self.log_score_symbols(encode(text))


def estimate(corpus: Sequence[int]) -> BigramLanguageModel:
    """Estimate the bigram model (P, Q) from an index-encoded corpus.

    All 27x27 cells start at 1 (Laplace smoothing) before the corpus bigrams
    are added, so an empty or single-symbol corpus still yields a valid,
    uniform model.

    Args:
        corpus: The reference corpus as symbol indices.

    Returns:
        BigramLanguageModel: The estimated model.

    Raises:
        InvalidAlphabetSymbolError: If the corpus contains an index outside [0, 26].
    """
    validate_symbols(corpus)

    if len(corpus) < 2:
        logger.warning(f"Corpus has {len(corpus)} symbol(s); the model is smoothing-only (uniform)")

    # Counting is done per condition (previous symbol) exactly as an n-gram LM would
    bigram_counts = ConditionalFreqDist(bigrams(corpus))

    counts = np.ones((ALPHABET_SIZE, ALPHABET_SIZE), dtype=np.float64)
    for previous in bigram_counts.conditions():
        for following, count in bigram_counts[previous].items():
            counts[previous, following] += count

    model = BigramLanguageModel(counts)
    logger.info(f"Estimated bigram model from {len(corpus)} symbols ({model.num_bigrams} bigrams)")
    return model


def save_model(lm: BigramLanguageModel, filepath: str) -> str:
    """Save a trained bigram model to disk.

    Args:
        lm: The trained BigramLanguageModel to save
        filepath: Destination pickle file; parent directories are created

    Returns:
        str: Path to the saved model file
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    logger.info(f"Saving model to {filepath}...")
    with open(filepath, 'wb') as f:
        pickle.dump(lm, f)

    logger.info(f"Model saved successfully!")
    logger.info(f"  - Training bigrams: {lm.num_bigrams:,}")
    logger.info(f"  - File: {filepath}")

    return filepath


def load_bigram_model(filepath: str) -> BigramLanguageModel:
    """Load a saved bigram model from disk.

    Args:
        filepath: Path to the saved model file

    Returns:
        BigramLanguageModel: The loaded model
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Model file not found: {filepath}")

    logger.info(f"Loading model from {filepath}...")
    with open(filepath, 'rb') as f:
        lm = pickle.load(f)

    logger.info(f"Model loaded successfully!")
    logger.info(f"  - Training bigrams: {lm.num_bigrams:,}")

    return lm
