"""
Tests for the Document Analyzer
===============================
"""

import json

import pytest

from proofing import (
    AnalysisRequest, AnalysisResult, CheckerSettings, DocumentAnalyzer, GrammarRule, Language,
    PatternConfig, PatternTable, SpellingFinding, create_analyzer,
)
from proofing.patterns import compile_rule_pattern


class BrokenDetector:
    def detect(self, text):
        raise RuntimeError('detector exploded')


def _exploding_replacement(match):
    raise RuntimeError('replacement failed')


class TestDocumentAnalyzer:
    """Tests for DocumentAnalyzer.analyze()."""

    def test_english_misspellings(self, analyzer):
        result = analyzer.analyze(AnalysisRequest('Notes', 'recieve and seperate'))
        assert result.language == Language.ENGLISH
        assert result.spelling_errors == (
            SpellingFinding('recieve', 'receive'),
            SpellingFinding('seperate', 'separate'),
        )
        assert result.grammar_errors == ()
        assert result.style_suggestions == ()

    def test_title_is_preserved(self, analyzer):
        result = analyzer.analyze(AnalysisRequest('My Title', 'hello'))
        assert result.document_title == 'My Title'

    def test_empty_content(self, analyzer):
        result = analyzer.analyze(AnalysisRequest('Empty', ''))
        assert result == AnalysisResult.empty('Empty')
        assert not result.has_issues

    def test_no_matches(self, analyzer):
        result = analyzer.analyze(AnalysisRequest('Clean', 'A perfectly fine sentence.'))
        assert result.issue_count == 0

    def test_repeated_misspelling_reported_once(self, analyzer):
        result = analyzer.analyze_text('recieve recieve recieve')
        assert len(result.spelling_errors) == 1

    def test_grammar_double_match(self, analyzer):
        result = analyzer.analyze_text('its tail and its head')
        assert len(result.grammar_errors) == 2
        assert result.grammar_errors[0].corrected == result.grammar_errors[1].corrected

    def test_turkish_document(self, analyzer):
        result = analyzer.analyze_text('Bu akşam yapıcaz')
        assert result.language == Language.TURKISH
        assert SpellingFinding('yapıcaz', 'yapacağız') in result.spelling_errors

    def test_german_document(self, analyzer):
        result = analyzer.analyze_text('Ich weiß, daß die Straße nass ist')
        assert result.language == Language.GERMAN
        assert result.spelling_errors == (SpellingFinding('daß', 'dass'),)

    def test_deterministic(self, analyzer):
        request = AnalysisRequest('Doc', "It's not bad overall, recieve its tail")
        first = analyzer.analyze(request)
        second = analyzer.analyze(request)
        assert first == second
        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_analyze_many_preserves_order(self, analyzer):
        results = analyzer.analyze_many([
            AnalysisRequest('one', 'recieve'),
            AnalysisRequest('two', 'kız'),
        ])
        assert [r.document_title for r in results] == ['one', 'two']
        assert [r.language for r in results] == [Language.ENGLISH, Language.TURKISH]


class TestFailureIsolation:
    """A failing component must not take down the whole result."""

    def test_failing_grammar_rule_keeps_other_findings(self):
        patterns = PatternConfig({
            Language.ENGLISH: PatternTable(
                spelling=(('recieve', 'receive'),),
                grammar=(GrammarRule(compile_rule_pattern('recieve'), 'boom', _exploding_replacement),),
            ),
        })
        result = DocumentAnalyzer(patterns=patterns).analyze_text('recieve')
        assert result.spelling_errors == (SpellingFinding('recieve', 'receive'),)
        assert result.grammar_errors == ()

    def test_failing_detector_defaults_to_english(self):
        analyzer = DocumentAnalyzer(detector=BrokenDetector())
        result = analyzer.analyze_text('recieve')
        assert result.language == Language.ENGLISH
        assert result.spelling_errors == (SpellingFinding('recieve', 'receive'),)

    def test_language_without_table(self):
        patterns = PatternConfig({Language.ENGLISH: PatternTable()})
        result = DocumentAnalyzer(patterns=patterns).analyze_text('kız')
        assert result.language == Language.TURKISH
        assert result.issue_count == 0


class TestAnalyzerConfiguration:
    """Tests for injected settings and the factory."""

    def test_disabled_checkers(self):
        settings = CheckerSettings(spelling_enabled=False, grammar_enabled=True, style_enabled=False)
        result = DocumentAnalyzer(settings=settings).analyze_text('recieve its not bad overall')
        assert result.spelling_errors == ()
        assert result.style_suggestions == ()
        assert len(result.grammar_errors) == 1

    def test_create_analyzer_reads_environment(self, monkeypatch):
        monkeypatch.setenv('TYPOPP_STYLE_ENABLED', 'false')
        analyzer = create_analyzer()
        assert analyzer.style.enabled is False
        assert analyzer.spelling.enabled is True

    def test_create_analyzer_with_patterns_file(self, tmp_path):
        patterns_file = tmp_path / 'patterns.json'
        patterns_file.write_text(json.dumps({'english': {'spelling': {'teh': 'the'}}}), encoding='utf-8')
        result = create_analyzer(str(patterns_file)).analyze_text('teh recieve')
        assert result.spelling_errors == (SpellingFinding('teh', 'the'),)


class TestAnalysisResult:
    """Tests for result serialization."""

    def test_to_dict_shape(self, analyzer):
        data = analyzer.analyze(AnalysisRequest('Doc', 'recieve')).to_dict()
        assert data == {
            'documentTitle': 'Doc',
            'language': 'English',
            'spellingErrors': [{'original': 'recieve', 'corrected': 'receive'}],
            'grammarErrors': [],
            'styleSuggestions': [],
        }

    def test_result_is_frozen(self, analyzer):
        result = analyzer.analyze_text('recieve')
        with pytest.raises(AttributeError):
            result.language = Language.FRENCH
