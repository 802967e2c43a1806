import json
import logging
import pathlib
from typing import List, Optional, Tuple

from utils.alphabet import encode
from utils.formatting import prepare_corpus_text

logger = logging.getLogger(__name__)


def load_corpus(filepath: pathlib.Path, spell_numbers: bool = False) -> List[int]:
    """Read a reference corpus and encode it for model estimation.

    Args:
        filepath: Path to a UTF-8 text file (Project Gutenberg dumps are fine).
        spell_numbers: Spell out digits before they are filtered away.

    Returns:
        List[int]: The cleaned corpus as symbol indices.

    """
    filepath = pathlib.Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Corpus file not found: {filepath}")

    with open(filepath, encoding="utf-8") as f:
        raw_text = f.read()

    cleaned = prepare_corpus_text(raw_text, spell_numbers=spell_numbers)
    logger.info(f"Loaded corpus {filepath.name}: {len(raw_text)} raw characters, {len(cleaned)} after cleaning")
    return encode(cleaned)


def normalize_ciphertext(text: str) -> str:
    """Lowercase a ciphertext and drop trailing line terminators.

    Spaces are cipher symbols, so leading and trailing spaces are kept. Any
    other foreign character is left for the codec to reject.
    """
    return text.rstrip("\r\n").lower()


def load_ciphertext(filepath: pathlib.Path) -> Tuple[str, Optional[str]]:
    """Read a ciphertext from a plain text or JSON file.

    JSON files look like ``{"ciphertext": "...", "key": "..."}`` where the
    optional key is the 27-character decoding key, used only for evaluation.

    Returns:
        Tuple of (ciphertext, key) where key is None when the file has none.

    """
    filepath = pathlib.Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Ciphertext file not found: {filepath}")

    with open(filepath, encoding="utf-8") as f:
        if filepath.suffix == ".json":
            data = json.load(f)
            if not isinstance(data, dict) or not isinstance(data.get("ciphertext"), str):
                raise ValueError(f"{filepath} must hold a JSON object with a \"ciphertext\" string")
            key = data.get("key")
            if key is not None and not isinstance(key, str):
                raise ValueError(f"{filepath}: \"key\" must be a string")
            return normalize_ciphertext(data["ciphertext"]), key
        return normalize_ciphertext(f.read()), None
