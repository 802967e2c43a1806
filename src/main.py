import argparse
import logging
import pathlib
import random
import sys

from lm_models.bigram_model import BigramLanguageModel, estimate, load_bigram_model, save_model
from search.metropolis_sampler import decipher
from search.permutation import encrypt, random_permutation, validate_permutation
from utils.alphabet import decode, encode
from utils.constants import (
    DEFAULT_CORPUS_FILE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RESTARTS,
    DEFAULT_TEMPERATURE,
)
from utils.formatting import clean_text
from utils.load_cipher import load_ciphertext, load_corpus, normalize_ciphertext
from utils.metrics import character_accuracy, symbol_error_rate

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 2
EXIT_NOT_CONVERGED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Break monoalphabetic substitution ciphers with a bigram model and Metropolis sampling")
    parser.add_argument("--verbose", action="store_true", help="Log every accepted move")
    subparsers = parser.add_subparsers(dest="command", required=True)

    decrypt_parser = subparsers.add_parser("decrypt", help="Recover the key of a ciphertext")
    model_source = decrypt_parser.add_mutually_exclusive_group()
    model_source.add_argument("--corpus", type=pathlib.Path, default=None,
                              help=f"Reference corpus text file (default: {DEFAULT_CORPUS_FILE.name})")
    model_source.add_argument("--model", type=pathlib.Path, default=None, help="Pickled model from 'train'")
    cipher_source = decrypt_parser.add_mutually_exclusive_group(required=True)
    cipher_source.add_argument("--ciphertext", type=str, help="Ciphertext string (in quotes)")
    cipher_source.add_argument("--cipher-file", type=pathlib.Path, help="Text or JSON file holding the ciphertext")
    decrypt_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    decrypt_parser.add_argument("--max-iterations", type=int, default=DEFAULT_MAX_ITERATIONS,
                                help="Iteration cap per restart")
    decrypt_parser.add_argument("--time-limit", type=float, default=None, help="Wall-clock limit per restart (s)")
    decrypt_parser.add_argument("--temperature", type=float, default=DEFAULT_TEMPERATURE)
    decrypt_parser.add_argument("--restarts", type=int, default=DEFAULT_RESTARTS)
    decrypt_parser.add_argument("--spell-numbers", action="store_true", help="Spell out digits in the corpus")

    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt a plaintext with a random key")
    plain_source = encrypt_parser.add_mutually_exclusive_group(required=True)
    plain_source.add_argument("--plaintext", type=str, help="Plaintext string")
    plain_source.add_argument("--plain-file", type=pathlib.Path, help="Path to plaintext file")
    encrypt_parser.add_argument("--seed", type=int, default=None, help="Random seed for the key")

    train_parser = subparsers.add_parser("train", help="Estimate and save a bigram model")
    train_parser.add_argument("--corpus", type=pathlib.Path, default=DEFAULT_CORPUS_FILE)
    train_parser.add_argument("--output", type=pathlib.Path, required=True, help="Destination pickle file")
    train_parser.add_argument("--spell-numbers", action="store_true", help="Spell out digits in the corpus")

    return parser


def _load_model(args) -> BigramLanguageModel:
    if args.model is not None:
        return load_bigram_model(str(args.model))
    corpus_path = args.corpus if args.corpus is not None else DEFAULT_CORPUS_FILE
    return estimate(load_corpus(corpus_path, spell_numbers=args.spell_numbers))


def run_decrypt(args) -> int:
    try:
        if args.cipher_file is not None:
            ciphertext, key = load_ciphertext(args.cipher_file)
        else:
            ciphertext, key = normalize_ciphertext(args.ciphertext), None
        symbols = encode(ciphertext)
        true_key = validate_permutation(encode(key)) if key else None
        lm_model = _load_model(args)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_INPUT_ERROR

    try:
        result = decipher(symbols, lm_model,
                          restarts=args.restarts,
                          seed=args.seed,
                          max_iterations=args.max_iterations,
                          time_limit=args.time_limit,
                          temperature=args.temperature)
    except ValueError as e:
        logger.error(f"Invalid sampler settings: {e}")
        return EXIT_INPUT_ERROR

    if true_key is not None:
        ser = symbol_error_rate(result.best_permutation, true_key, symbols)
        accuracy = character_accuracy(result.best_plaintext, decode(true_key[s] for s in symbols))
        logger.info(f"SER: {ser:.4f} ({ser*100:.2f}% symbol errors), character accuracy {accuracy:.4f}")

    print(result.best_plaintext)
    print(f"key: {decode(result.best_permutation)!r}")

    if not result.converged:
        logger.warning("Sampler did not converge; printed the best decode found")
        return EXIT_NOT_CONVERGED
    return EXIT_OK


def run_encrypt(args) -> int:
    try:
        if args.plain_file is not None:
            with open(args.plain_file, encoding="utf-8") as f:
                raw_text = f.read()
        else:
            raw_text = args.plaintext
    except (OSError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_INPUT_ERROR

    plaintext = clean_text(raw_text)
    key = random_permutation(random.Random(args.seed))
    print(f"ciphertext: {decode(encrypt(plaintext, key))!r}")
    print(f"key: {decode(key)!r}")
    return EXIT_OK


def run_train(args) -> int:
    try:
        corpus = load_corpus(args.corpus, spell_numbers=args.spell_numbers)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_INPUT_ERROR

    save_model(estimate(corpus), str(args.output))
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "decrypt":
        return run_decrypt(args)
    if args.command == "encrypt":
        return run_encrypt(args)
    return run_train(args)


if __name__ == "__main__":
    sys.exit(main())
