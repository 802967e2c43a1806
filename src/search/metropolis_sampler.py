import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from lm_models.bigram_model import BigramLanguageModel
from lm_models.energy import make_energy_function
from search.permutation import Permutation, identity_permutation, propose, validate_permutation
from search.stopping import should_stop
from utils.alphabet import decode_with
from utils.constants import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RESTARTS,
    DEFAULT_TEMPERATURE,
    HISTORY_SIZE,
    LOG_INTERVAL,
    PLAINTEXT_LENGTH_TO_SHOW,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplerState:
    """One point of the random walk. Transitions build a new state instead of mutating this one."""

    permutation: Permutation
    energy: float
    history: Tuple[float, ...]
    best_permutation: Permutation
    best_energy: float

    @classmethod
    def initial(cls, permutation: Permutation, energy: float) -> "SamplerState":
        return cls(permutation, energy, (energy,), permutation, energy)

    def accept(self, permutation: Permutation, energy: float, history_size: int = HISTORY_SIZE) -> "SamplerState":
        """State after moving to ``permutation``; the oldest energy is evicted once the history is full."""
        history = (self.history + (energy,))[-history_size:]
        if energy < self.best_energy:
            return SamplerState(permutation, energy, history, permutation, energy)
        return SamplerState(permutation, energy, history, self.best_permutation, self.best_energy)


@dataclass(frozen=True)
class SamplerResult:
    """Outcome of a run. ``converged`` is False when a safety limit ended the walk."""

    permutation: Permutation
    energy: float
    plaintext: str
    best_permutation: Permutation
    best_energy: float
    best_plaintext: str
    iterations: int
    accepted: int
    converged: bool


class MetropolisSampler:
    def __init__(self,
                 ciphertext: List[int],
                 lm_model: BigramLanguageModel,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 time_limit: Optional[float] = None,
                 temperature: float = DEFAULT_TEMPERATURE,
                 history_size: int = HISTORY_SIZE,
                 initial_permutation: Optional[Sequence[int]] = None,
                 on_accept: Optional[Callable[[SamplerState, str], None]] = None):
        """
        Initializes a Metropolis random walk over decoding keys.

        Args:
            ciphertext: Index-encoded ciphertext.
            lm_model: Bigram model supplying P and Q for the energy.
            seed: Seed for a private random.Random, ignored when ``rng`` is given.
            rng: Random generator used for proposals and acceptance draws.
            max_iterations: Hard cap on proposals; reaching it ends the run unconverged.
            time_limit: Optional wall-clock budget in seconds.
            temperature: Scales the acceptance probability exp(-dE / T); 1.0 is plain Metropolis.
            history_size: Number of accepted energies the stopping heuristic looks at.
            initial_permutation: Starting key, the identity by default.
            on_accept: Called with the new state and its decode after every accepted move.
        """
        if max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        if temperature <= 0:
            raise ValueError(f"temperature must be positive, got {temperature}")
        if time_limit is not None and time_limit < 0:
            raise ValueError(f"time_limit must not be negative, got {time_limit}")

        self._ciphertext = ciphertext
        self._energy = make_energy_function(ciphertext, lm_model)
        self._rng = rng if rng is not None else random.Random(seed)
        self._max_iterations = max_iterations
        self._time_limit = time_limit
        self._temperature = temperature
        self._history_size = history_size
        self._on_accept = on_accept

        if initial_permutation is None:
            start = identity_permutation()
        else:
            start = validate_permutation(initial_permutation)
        self._state = SamplerState.initial(start, self._energy(start))

    @property
    def state(self) -> SamplerState:
        return self._state

    @property
    def energy_function(self):
        return self._energy

    def decrypt(self, permutation: Sequence[int]) -> str:
        return decode_with(permutation, self._ciphertext)

    def acceptance_probability(self, delta: float) -> float:
        """Metropolis acceptance probability for an energy change ``delta``."""
        if delta < 0:
            return 1.0
        return math.exp(-delta / self._temperature)

    def step(self, state: SamplerState) -> Tuple[SamplerState, bool]:
        """
        Performs one Metropolis transition from ``state``.

        A downhill proposal is always accepted without consuming a random
        draw; otherwise a uniform draw is compared with exp(-dE / T).

        Returns:
            Tuple of (next_state, accepted). On rejection next_state is ``state``.
        """
        proposal = propose(state.permutation, self._rng)
        proposed_energy = self._energy(proposal)
        delta = proposed_energy - state.energy

        if delta < 0 or self._rng.random() < self.acceptance_probability(delta):
            return state.accept(proposal, proposed_energy, self._history_size), True
        return state, False

    def _report_accept(self, state: SamplerState) -> None:
        if self._on_accept is None and not logger.isEnabledFor(logging.DEBUG):
            return
        plaintext = self.decrypt(state.permutation)
        logger.debug(f"Accepted E={state.energy:.2f}: {plaintext[:PLAINTEXT_LENGTH_TO_SHOW]}")
        if self._on_accept is not None:
            self._on_accept(state, plaintext)

    def run(self, log_interval: int = LOG_INTERVAL) -> SamplerResult:
        """
        Runs the random walk until the stopping heuristic fires or a safety limit is hit.

        Args:
            log_interval: How often to log progress, in iterations.

        Returns:
            SamplerResult: The final key and decode, the best key seen, and run statistics.
        """
        state = self._state
        logger.info(f"Starting Metropolis sampling (cap {self._max_iterations} iterations)...")
        logger.info(f"Initial energy: {state.energy:.2f}")
        logger.info(f"Initial plaintext: {self.decrypt(state.permutation)[:PLAINTEXT_LENGTH_TO_SHOW]}...")

        started = time.monotonic()
        iterations = 0
        accepted = 0
        converged = False

        while iterations < self._max_iterations:
            if self._time_limit is not None and time.monotonic() - started >= self._time_limit:
                logger.warning(f"Time limit of {self._time_limit}s reached")
                break

            state, was_accepted = self.step(state)
            iterations += 1

            if was_accepted:
                accepted += 1
                self._report_accept(state)
                if should_stop(state.history, self._history_size):
                    converged = True
                    break

            if iterations % log_interval == 0:
                logger.info(f"Iteration {iterations}: energy {state.energy:.2f}, best {state.best_energy:.2f}, "
                            f"accepted {accepted}")
                logger.info(f"  Current plaintext: {self.decrypt(state.permutation)[:PLAINTEXT_LENGTH_TO_SHOW]}...")

        self._state = state

        if converged:
            logger.info(f"Converged after {iterations} iterations ({accepted} accepted)")
        else:
            logger.warning(f"Did not converge within {iterations} iterations ({accepted} accepted)")
        logger.info(f"Final energy: {state.energy:.2f} (best {state.best_energy:.2f})")

        return SamplerResult(
            permutation=state.permutation,
            energy=state.energy,
            plaintext=self.decrypt(state.permutation),
            best_permutation=state.best_permutation,
            best_energy=state.best_energy,
            best_plaintext=self.decrypt(state.best_permutation),
            iterations=iterations,
            accepted=accepted,
            converged=converged,
        )


def decipher(ciphertext: List[int],
             lm_model: BigramLanguageModel,
             restarts: int = DEFAULT_RESTARTS,
             seed: Optional[int] = None,
             **sampler_kwargs) -> SamplerResult:
    """
    Runs independent samplers and keeps the one that reached the lowest energy.

    Each restart draws its own generator from a master generator seeded with
    ``seed``, so the whole batch is reproducible.

    Args:
        ciphertext: Index-encoded ciphertext.
        lm_model: Bigram model shared read-only by all samplers.
        restarts: Number of independent runs.
        seed: Seed for the master generator.
        **sampler_kwargs: Forwarded to MetropolisSampler.

    Returns:
        SamplerResult: The result with the lowest best energy.
    """
    if restarts <= 0:
        raise ValueError(f"restarts must be positive, got {restarts}")

    master_rng = random.Random(seed)
    best_result = None
    for restart in range(restarts):
        sampler = MetropolisSampler(ciphertext, lm_model, rng=random.Random(master_rng.getrandbits(64)),
                                    **sampler_kwargs)
        result = sampler.run()
        logger.info(f"Restart {restart + 1}/{restarts}: best energy {result.best_energy:.2f}, "
                    f"converged={result.converged}")
        if best_result is None or result.best_energy < best_result.best_energy:
            best_result = result

    return best_result
