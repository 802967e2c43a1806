"""Fixed bijection between the 27 plaintext symbols and the indices 0-26.

'a'-'z' map to 0-25 and the space maps to 26. Every other component works on
index sequences; this module is the only place characters are touched.
"""

from typing import Iterable, List, Sequence

from utils.constants import ALPHABET_SIZE, PLAINTEXT_ALPHABET

SYMBOL_TO_INDEX = {char: idx for idx, char in enumerate(PLAINTEXT_ALPHABET)}


class InvalidAlphabetSymbolError(ValueError):
    """Raised when text or an index sequence leaves the 27-symbol alphabet."""

    def __init__(self, symbol, position: int):
        self.symbol = symbol
        self.position = position
        super().__init__(f"Symbol {symbol!r} at position {position} is outside the 27-symbol alphabet")


def encode(text: str) -> List[int]:
    """Encode a cleaned string into symbol indices.

    Args:
        text: String made only of lowercase letters and spaces.

    Returns:
        List[int]: One index per character.

    Raises:
        InvalidAlphabetSymbolError: If any character is outside the alphabet.
    """
    symbols = []
    for position, char in enumerate(text):
        try:
            symbols.append(SYMBOL_TO_INDEX[char])
        except KeyError:
            raise InvalidAlphabetSymbolError(char, position) from None
    return symbols


def validate_symbols(symbols: Iterable[int]) -> None:
    """Raise InvalidAlphabetSymbolError on the first index outside [0, 26]."""
    for position, symbol in enumerate(symbols):
        if not 0 <= symbol < ALPHABET_SIZE:
            raise InvalidAlphabetSymbolError(symbol, position)


def decode(symbols: Iterable[int]) -> str:
    """Map symbol indices back to their characters."""
    return "".join(PLAINTEXT_ALPHABET[symbol] for symbol in symbols)


def decode_with(permutation: Sequence[int], symbols: Iterable[int]) -> str:
    """Decode a ciphertext by substituting each symbol through the permutation."""
    return "".join(PLAINTEXT_ALPHABET[permutation[symbol]] for symbol in symbols)
