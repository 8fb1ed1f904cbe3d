"""
Style Checker
=============
Suggests rewordings for a short list of known phrases.
"""

from typing import List

from .base import BaseChecker
from .models import StyleSuggestion
from .patterns import PatternTable


class StyleChecker(BaseChecker):
    """
    Reports at most one suggestion per style rule.

    Only the first occurrence of a phrase is reported; suggestions are
    illustrative rather than exhaustive.
    """

    CHECKER_NAME = "Style"
    CHECKER_VERSION = "1.0.0"
    CATEGORY = "styleSuggestions"

    def _check_impl(self, text: str, table: PatternTable) -> List[StyleSuggestion]:
        suggestions = []
        for rule in table.style:
            match = rule.pattern.search(text)
            if match:
                suggestions.append(StyleSuggestion(original=match.group(0), suggestion=rule.suggestion))
        return suggestions
