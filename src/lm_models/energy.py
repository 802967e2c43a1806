"""
Energy (negative log-likelihood) of a candidate decoding key.

For a permutation sigma used as a decoding table, the hypothesised plaintext
is x[t] = sigma[c[t]] and

    E(sigma) = -ln P[x[0]] - sum_t ln Q[x[t], x[t+1]]

Lower energy means a more likely plaintext. The evaluator holds read-only
references to the ciphertext and the model's log tables; it never mutates
them, so one evaluator can be shared by any number of samplers.
"""

from typing import Sequence

import numpy as np

from lm_models.bigram_model import BigramLanguageModel
from utils.alphabet import validate_symbols


class EnergyEvaluator:
    """Scores decoding keys against a fixed ciphertext under a bigram model."""

    def __init__(self, ciphertext: Sequence[int], log_p: np.ndarray, log_q: np.ndarray):
        """
        Args:
            ciphertext: Index-encoded ciphertext, at least one symbol long.
            log_p: Natural log of the marginal distribution P.
            log_q: Natural log of the row-stochastic transition matrix Q.
        """
        if len(ciphertext) == 0:
            raise ValueError("Ciphertext must contain at least one symbol")
        validate_symbols(ciphertext)

        self.ciphertext = np.asarray(ciphertext, dtype=np.intp)
        self.log_p = log_p
        self.log_q = log_q

    def energy(self, permutation: Sequence[int]) -> float:
        """Negative log-likelihood of the plaintext obtained by decoding with ``permutation``."""
        x = np.asarray(permutation, dtype=np.intp)[self.ciphertext]
        log_likelihood = self.log_p[x[0]] + self.log_q[x[:-1], x[1:]].sum()
        return float(-log_likelihood)

    def __call__(self, permutation: Sequence[int]) -> float:
        return self.energy(permutation)


def make_energy_function(ciphertext: Sequence[int], model: BigramLanguageModel) -> EnergyEvaluator:
    """Bind a ciphertext to a model's P and Q, returning the energy function over permutations."""
    return EnergyEvaluator(ciphertext, model.log_p, model.log_q)
