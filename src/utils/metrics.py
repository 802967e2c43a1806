from typing import Iterable, Sequence


def character_accuracy(decoded: str, reference: str) -> float:
    """Fraction of positions where the decoded text matches the reference.

    Both strings are compared up to the length of the longer one, so a length
    mismatch counts against the accuracy.
    """
    length = max(len(decoded), len(reference))
    if length == 0:
        return 1.0
    matches = sum(1 for a, b in zip(decoded, reference) if a == b)
    return matches / length


def symbol_error_rate(permutation: Sequence[int], true_key: Sequence[int], ciphertext: Iterable[int]) -> float:
    """
    Calculates the Symbol Error Rate (SER) of a decoding key against the ground truth.

    SER is the proportion of cipher symbols occurring in the ciphertext that
    the key decodes differently from the true key. Symbols that never occur
    cannot be recovered and are not counted.

    Returns:
        The SER value between 0.0 (perfect) and 1.0 (all wrong).
    """
    used_symbols = set(ciphertext)
    if not used_symbols:
        return 0.0
    mismatches = sum(1 for symbol in used_symbols if permutation[symbol] != true_key[symbol])
    return mismatches / len(used_symbols)
