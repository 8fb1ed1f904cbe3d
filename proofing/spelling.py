"""
Spelling Checker
================
Dictionary lookup of known misspellings.

This is a table lookup, not a spellchecker: a word is flagged only when it
appears, as a whole whitespace-delimited token, in the language's
misspelling table. No edit distance, no morphology.
"""

from typing import List

from .base import BaseChecker, get_word_tokens
from .models import SpellingFinding
from .patterns import PatternTable


class SpellingChecker(BaseChecker):
    """Flags table misspellings present in the text."""

    CHECKER_NAME = "Spelling"
    CHECKER_VERSION = "1.0.0"
    CATEGORY = "spellingErrors"

    def _check_impl(self, text: str, table: PatternTable) -> List[SpellingFinding]:
        tokens = set(get_word_tokens(text))
        # One finding per table entry, however often the word occurs
        return [
            SpellingFinding(original=incorrect, corrected=correct)
            for incorrect, correct in table.spelling
            if incorrect.lower() in tokens
        ]
