"""
Tests for the Spelling, Grammar and Style Checkers
==================================================
"""

import pytest

from config_logging import AnalysisError
from proofing.grammar import GrammarChecker
from proofing.models import GrammarFinding, Language, SpellingFinding, StyleSuggestion
from proofing.patterns import (
    GrammarRule, PatternTable, StyleRule, compile_rule_pattern, default_pattern_config,
)
from proofing.spelling import SpellingChecker
from proofing.style import StyleChecker


@pytest.fixture(scope='module')
def patterns():
    return default_pattern_config()


@pytest.fixture
def english(patterns):
    return patterns.table_for(Language.ENGLISH)


@pytest.fixture
def turkish(patterns):
    return patterns.table_for(Language.TURKISH)


def _exploding_replacement(match):
    raise RuntimeError('replacement failed')


class TestSpellingChecker:
    """Tests for SpellingChecker."""

    def test_checker_attributes(self):
        checker = SpellingChecker()
        assert checker.CHECKER_NAME == "Spelling"
        assert checker.CATEGORY == "spellingErrors"

    def test_finds_misspellings_in_table_order(self, english):
        findings = SpellingChecker().check('seperate then recieve', english)
        assert findings == [
            SpellingFinding('recieve', 'receive'),
            SpellingFinding('seperate', 'separate'),
        ]

    def test_repeated_word_reported_once(self, english):
        findings = SpellingChecker().check('recieve recieve recieve', english)
        assert findings == [SpellingFinding('recieve', 'receive')]

    def test_case_insensitive(self, english):
        findings = SpellingChecker().check('Recieve this', english)
        assert findings == [SpellingFinding('recieve', 'receive')]

    def test_tokens_are_whitespace_delimited(self, english):
        """Test that a word with trailing punctuation is a different token."""
        assert SpellingChecker().check('I will recieve.', english) == []

    def test_substring_not_flagged(self, english):
        assert SpellingChecker().check('recieved', english) == []

    def test_turkish_table(self, turkish):
        findings = SpellingChecker().check('yarın yapıcaz', turkish)
        assert findings == [SpellingFinding('yapıcaz', 'yapacağız')]

    def test_empty_text(self, english):
        assert SpellingChecker().check('', english) == []

    def test_disabled_checker(self, english):
        assert SpellingChecker(enabled=False).check('recieve', english) == []

    def test_get_status(self):
        status = SpellingChecker(enabled=False).get_status()
        assert status['name'] == 'Spelling'
        assert status['enabled'] is False


class TestGrammarChecker:
    """Tests for GrammarChecker."""

    def test_one_finding_per_match(self, english):
        findings = GrammarChecker().check('its tail and its head', english)
        assert [f.original for f in findings] == ['its', 'its']

    def test_corrected_is_whole_text_rewrite(self, english):
        findings = GrammarChecker().check('its tail and its head', english)
        assert {f.corrected for f in findings} == {"it's tail and it's head"}

    def test_contraction_swapped_to_possessive(self, english):
        findings = GrammarChecker().check("It's raining", english)
        assert findings == [GrammarFinding(
            original="It's",
            explanation='Check if possessive or contraction is intended',
            corrected='its raining',
        )]

    def test_turkish_question_particle(self, turkish):
        findings = GrammarChecker().check('Sen geldinmi', turkish)
        assert len(findings) == 1
        assert findings[0].original == 'geldinmi'
        assert findings[0].corrected == 'Sen geldin mi'
        assert findings[0].explanation == 'Soru eki ayrı yazılmalı'

    def test_rules_do_not_compose(self):
        """Test each rule rewrites the original text, not the previous rule's output."""
        table = PatternTable(grammar=(
            GrammarRule(compile_rule_pattern(r'\bfoo\b'), 'foo rule', 'FOO'),
            GrammarRule(compile_rule_pattern(r'\bbar\b'), 'bar rule', 'BAR'),
        ))
        findings = GrammarChecker().check('foo bar', table)
        assert [f.corrected for f in findings] == ['FOO bar', 'foo BAR']

    def test_no_matches(self, english):
        assert GrammarChecker().check('A plain sentence.', english) == []

    def test_failing_rule_raises_analysis_error(self):
        table = PatternTable(grammar=(
            GrammarRule(compile_rule_pattern('x'), 'broken', _exploding_replacement),
        ))
        with pytest.raises(AnalysisError) as exc_info:
            GrammarChecker().check('x', table)
        assert exc_info.value.details['checker'] == 'Grammar'

    def test_safe_check_returns_empty_on_failure(self):
        table = PatternTable(grammar=(
            GrammarRule(compile_rule_pattern('x'), 'broken', _exploding_replacement),
        ))
        assert GrammarChecker().safe_check('x', table) == []


class TestStyleChecker:
    """Tests for StyleChecker."""

    def test_reports_first_occurrence_only(self, english):
        findings = StyleChecker().check('not bad overall, really not bad overall', english)
        assert findings == [StyleSuggestion('not bad overall', 'satisfactory overall')]

    def test_original_keeps_document_casing(self, english):
        findings = StyleChecker().check('Not Bad Overall', english)
        assert findings[0].original == 'Not Bad Overall'

    def test_rules_in_declaration_order(self, english):
        text = 'not bad overall and very good because it works fast'
        findings = StyleChecker().check(text, english)
        assert [f.original for f in findings] == [
            'very good because it works fast',
            'not bad overall',
        ]

    def test_custom_table(self):
        table = PatternTable(style=(StyleRule(compile_rule_pattern('utilize'), 'use'),))
        assert StyleChecker().check('We utilize tools', table) == [StyleSuggestion('utilize', 'use')]

    def test_no_matches(self, english):
        assert StyleChecker().check('Nothing to see', english) == []
