from unidecode import unidecode
import re
from num2words import num2words
from parameter_validator import parameter_validator, strongly_typed

GUTENBERG_START_MARKER = "*** START OF THIS PROJECT GUTENBERG EBOOK"
GUTENBERG_END_MARKER = "*** END OF THIS PROJECT GUTENBERG EBOOK"


def numbers_to_words(text: str) -> str:
	"""Convert all numbers in the input text to their word representations.

	Args:
			text (str): The input text containing numbers.

	Returns:
		str: The text with numbers converted to words.

	"""

	def replace_number(match: re.Match) -> str:
		number_str = match.group()
		if match.group(1):
			return num2words(float(number_str))
		return num2words(int(number_str))

	return re.sub(r"\d+(\.\d+)?", replace_number, text)


def strip_gutenberg_boilerplate(text: str) -> str:
    """Keep only the text between the Project Gutenberg start/end markers.

    Text without the markers is returned unchanged.
    """
    try:
        start_index = text.index(GUTENBERG_START_MARKER)
        start_index = text.index('\n', start_index) # Find the newline after the marker
    except ValueError:
        start_index = 0 # If marker not found, start from the beginning

    try:
        end_index = text.index(GUTENBERG_END_MARKER)
    except ValueError:
        end_index = len(text) # If marker not found, go to the end

    return text[start_index:end_index]


@parameter_validator(text=strongly_typed)
def clean_text(text: str) -> str:
    """
    Reduces raw text to the 27-symbol alphabet.

    Each line is trimmed, transliterated to ASCII (e.g. "naïve" -> "naive"),
    lowercased and filtered to a-z and spaces, then terminated with a single
    space. The joined result has runs of spaces collapsed and is stripped.
    """
    cleaned_lines = []
    for line in text.splitlines():
        line = unidecode(line.strip()).lower()
        line = re.sub(r"[^a-z ]", "", line)
        cleaned_lines.append(line + " ")

    text = "".join(cleaned_lines)
    return re.sub(r" +", " ", text).strip()


def prepare_corpus_text(text: str, spell_numbers: bool = False) -> str:
    """
    Cleans a raw reference corpus for model estimation.

    1. Removes Gutenberg headers/footers.
    2. Optionally converts numbers to words ("101" -> "one hundred and one").
    3. Reduces the result to the 27-symbol alphabet.
    """
    text = strip_gutenberg_boilerplate(text)
    if spell_numbers:
        text = numbers_to_words(text)
    return clean_text(text)
