"""
Document Analyzer
=================
Orchestrates language detection and the three checkers into one
AnalysisResult per document.

The analyzer is a pure function of its input: no I/O and no state
between calls. A failing checker contributes an empty list for its
category and a failing detector falls back to English, so callers always
receive a structurally valid result.
"""

from typing import Iterable, List, Optional

from config_logging import get_logger

from .config import CheckerSettings, load_pattern_config
from .detector import LanguageDetector
from .grammar import GrammarChecker
from .models import AnalysisRequest, AnalysisResult, Language
from .patterns import PatternConfig, default_pattern_config
from .spelling import SpellingChecker
from .style import StyleChecker

_logger = get_logger('proofing.analyzer')


class DocumentAnalyzer:
    """Runs detection and checking for documents against injected pattern tables."""

    def __init__(
        self,
        patterns: Optional[PatternConfig] = None,
        detector: Optional[LanguageDetector] = None,
        settings: Optional[CheckerSettings] = None,
    ):
        self.patterns = patterns or default_pattern_config()
        self.detector = detector or LanguageDetector()
        self.settings = settings or CheckerSettings()
        self.spelling = SpellingChecker(enabled=self.settings.spelling_enabled)
        self.grammar = GrammarChecker(enabled=self.settings.grammar_enabled)
        self.style = StyleChecker(enabled=self.settings.style_enabled)

    def detect_language(self, text: str) -> Language:
        try:
            return self.detector.detect(text)
        except Exception as e:
            _logger.error(f"Language detection failed, defaulting to English: {e}", exc_info=True)
            return Language.ENGLISH

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Analyze one document. Never raises for analysis failures."""
        content = request.content or ''
        language = self.detect_language(content)
        try:
            return self._analyze(request.title, content, language)
        except Exception as e:
            _logger.error(f"Analysis failed for {request.title!r}: {e}", exc_info=True)
            return AnalysisResult.empty(request.title, language)

    def _analyze(self, title: str, content: str, language: Language) -> AnalysisResult:
        table = self.patterns.table_for(language)

        result = AnalysisResult(
            document_title=title,
            language=language,
            spelling_errors=tuple(self.spelling.safe_check(content, table)),
            grammar_errors=tuple(self.grammar.safe_check(content, table)),
            style_suggestions=tuple(self.style.safe_check(content, table)),
        )
        _logger.debug(
            "Analyzed document",
            title=title,
            language=language.value,
            spelling=len(result.spelling_errors),
            grammar=len(result.grammar_errors),
            style=len(result.style_suggestions),
        )
        return result

    def analyze_many(self, requests: Iterable[AnalysisRequest]) -> List[AnalysisResult]:
        """Analyze a batch, preserving order."""
        return [self.analyze(request) for request in requests]

    def analyze_text(self, content: str, title: str = "") -> AnalysisResult:
        return self.analyze(AnalysisRequest(title=title, content=content))


def create_analyzer(patterns_file: Optional[str] = None) -> DocumentAnalyzer:
    """Build an analyzer from the patterns file and environment settings."""
    return DocumentAnalyzer(
        patterns=load_pattern_config(patterns_file),
        settings=CheckerSettings.from_env(),
    )
