"""
Tests for corpus and plaintext cleanup.
"""

from utils.formatting import (
    clean_text,
    numbers_to_words,
    prepare_corpus_text,
    strip_gutenberg_boilerplate,
)


class TestCleanText:
    """Reduction of raw text to the 27-symbol alphabet."""

    def test_lowercases_and_filters(self):
        assert clean_text("Hello, World!") == "hello world"

    def test_lines_are_trimmed_and_joined_with_one_space(self):
        assert clean_text("  the  \n quick\nbrown fox  ") == "the quick brown fox"

    def test_transliterates_accents(self):
        assert clean_text("Naïve café") == "naive cafe"

    def test_collapses_runs_of_spaces(self):
        assert clean_text("a  -  b") == "a b"

    def test_digits_are_dropped(self):
        assert clean_text("room 101 is empty") == "room is empty"

    def test_empty_input(self):
        assert clean_text("") == ""
        assert clean_text("\n\n") == ""

    def test_output_only_contains_alphabet(self):
        cleaned = clean_text("It's 5 o'clock -- time for TEA!\nÉtude #3")
        assert set(cleaned) <= set("abcdefghijklmnopqrstuvwxyz ")


class TestCorpusPreparation:

    def test_numbers_to_words(self):
        assert numbers_to_words("I have 3 cats") == "I have three cats"

    def test_gutenberg_markers_are_removed(self):
        text = (
            "Header junk\n"
            "*** START OF THIS PROJECT GUTENBERG EBOOK SOMETHING ***\n"
            "The real text.\n"
            "*** END OF THIS PROJECT GUTENBERG EBOOK SOMETHING ***\n"
            "Footer junk\n"
        )
        assert strip_gutenberg_boilerplate(text).strip() == "The real text."

    def test_text_without_markers_is_unchanged(self):
        assert strip_gutenberg_boilerplate("plain text") == "plain text"

    def test_prepare_corpus_text_spells_numbers_when_asked(self):
        assert prepare_corpus_text("Chapter 2") == "chapter"
        assert prepare_corpus_text("Chapter 2", spell_numbers=True) == "chapter two"
