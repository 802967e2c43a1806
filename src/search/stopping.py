from typing import Sequence

from utils.constants import HISTORY_SIZE


def net_energy_change(history: Sequence[float]) -> float:
    """Sum of consecutive differences over the history window.

    The sum telescopes to last - first; evaluating it in that form keeps it
    exact in floating point, so a walk that returns to the same energy gives
    exactly 0.0 rather than a rounding residue.
    """
    if len(history) < 2:
        return 0.0
    return history[-1] - history[0]


def should_stop(history: Sequence[float], window: int = HISTORY_SIZE) -> bool:
    """Empirical convergence test over the most recent accepted energies.

    Fires only on a full window whose net energy change is exactly zero, i.e.
    the walk has been wandering inside an energy basin instead of descending.
    This is a heuristic, not a proof that the optimum was reached.

    Args:
        history: Accepted energies, oldest first.
        window: Number of most recent entries the test looks at; fewer
                entries than this never stop the walk.

    Returns:
        bool: True when the walk looks converged.
    """
    if len(history) < window:
        return False
    return net_energy_change(history[-window:]) == 0.0
