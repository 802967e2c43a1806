import pathlib
import string

PLAINTEXT_ALPHABET = string.ascii_lowercase + " "
ALPHABET_SIZE = len(PLAINTEXT_ALPHABET)  # 27 symbols: a-z plus space
SPACE_INDEX = PLAINTEXT_ALPHABET.index(" ")

# Metropolis sampler
HISTORY_SIZE = 100  # Accepted energies kept for the stopping heuristic
DEFAULT_MAX_ITERATIONS = 50_000
DEFAULT_TEMPERATURE = 1.0
DEFAULT_RESTARTS = 1
LOG_INTERVAL = 1000
PLAINTEXT_LENGTH_TO_SHOW = 80

PROJECT_ROOT = pathlib.Path(__file__).parent.parent.parent
DATA_PATH = PROJECT_ROOT / "data"
CORPUS_PATH = DATA_PATH / "corpus"
DEFAULT_CORPUS_FILE = CORPUS_PATH / "english_sample.txt"
