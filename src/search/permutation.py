"""
Decoding keys over the 27-symbol alphabet and the random-transposition proposer.

A permutation is a tuple of length 27 where position i holds the plaintext
symbol that cipher symbol i decodes to. Tuples are immutable, so every
proposal is a new object and earlier states are never altered.
"""

import random
from typing import Sequence, Tuple

from utils.alphabet import encode
from utils.constants import ALPHABET_SIZE

Permutation = Tuple[int, ...]


def identity_permutation() -> Permutation:
    return tuple(range(ALPHABET_SIZE))


def random_permutation(rng: random.Random) -> Permutation:
    symbols = list(range(ALPHABET_SIZE))
    rng.shuffle(symbols)
    return tuple(symbols)


def validate_permutation(permutation: Sequence[int]) -> Permutation:
    """Return the permutation as a tuple, raising ValueError if it is not a bijection over the alphabet."""
    permutation = tuple(permutation)
    if sorted(permutation) != list(range(ALPHABET_SIZE)):
        raise ValueError(f"Not a permutation of the {ALPHABET_SIZE} symbols: {permutation}")
    return permutation


def invert_permutation(permutation: Sequence[int]) -> Permutation:
    inverse = [0] * ALPHABET_SIZE
    for cipher_symbol, plain_symbol in enumerate(permutation):
        inverse[plain_symbol] = cipher_symbol
    return tuple(inverse)


def swap(permutation: Permutation, i: int, j: int) -> Permutation:
    """Copy of ``permutation`` with positions i and j exchanged (unchanged when i == j)."""
    swapped = list(permutation)
    swapped[i], swapped[j] = swapped[j], swapped[i]
    return tuple(swapped)


def propose(permutation: Permutation, rng: random.Random) -> Permutation:
    """Symmetric proposal: swap two positions drawn independently and uniformly.

    i == j is allowed and yields the same permutation.
    """
    i = rng.randrange(ALPHABET_SIZE)
    j = rng.randrange(ALPHABET_SIZE)
    return swap(permutation, i, j)


def encrypt(plaintext: str, key: Sequence[int]) -> list:
    """Encrypt a cleaned plaintext so that decoding with ``key`` gives it back.

    Returns:
        list: The index-encoded ciphertext, c[t] = key^-1[x[t]].
    """
    inverse = invert_permutation(validate_permutation(key))
    return [inverse[symbol] for symbol in encode(plaintext)]
