"""
Grammar Checker
===============
Applies the detected language's regex grammar rules to the raw text.

Each rule emits one finding per match. A finding's ``corrected`` field is
the full document rewritten by that single rule, so two matches of one
rule produce two findings with identical ``corrected`` text, and edits
from other rules never appear in it. See ``GrammarRule``.
"""

from typing import List

from .base import BaseChecker
from .models import GrammarFinding
from .patterns import PatternTable


class GrammarChecker(BaseChecker):
    """Runs every grammar rule in declaration order."""

    CHECKER_NAME = "Grammar"
    CHECKER_VERSION = "1.0.0"
    CATEGORY = "grammarErrors"

    def _check_impl(self, text: str, table: PatternTable) -> List[GrammarFinding]:
        findings: List[GrammarFinding] = []
        for rule in table.grammar:
            findings.extend(rule(text))
        return findings
