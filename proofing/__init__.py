"""
Typopp Proofing Package
=======================
Version: 1.0.0

Rules-based document proofing:
- Language detection from diacritics and common function words
  (English, Turkish, German, French)
- Spelling: lookup of known misspellings per language
- Grammar: regex rules with whole-document rewrites
- Style: preferred rewordings for known phrases

Pattern tables are immutable and injected into DocumentAnalyzer.
"""

__version__ = "1.0.0"

from .models import (
    AnalysisRequest,
    AnalysisResult,
    GrammarFinding,
    Language,
    SpellingFinding,
    StyleSuggestion,
)
from .patterns import GrammarRule, PatternConfig, PatternTable, StyleRule, default_pattern_config
from .detector import LanguageDetector, LanguageProfile
from .config import CheckerSettings, load_pattern_config
from .analyzer import DocumentAnalyzer, create_analyzer
from .report import format_analysis_result

__all__ = [
    'AnalysisRequest',
    'AnalysisResult',
    'CheckerSettings',
    'DocumentAnalyzer',
    'GrammarFinding',
    'GrammarRule',
    'Language',
    'LanguageDetector',
    'LanguageProfile',
    'PatternConfig',
    'PatternTable',
    'SpellingFinding',
    'StyleRule',
    'StyleSuggestion',
    'create_analyzer',
    'default_pattern_config',
    'format_analysis_result',
    'load_pattern_config',
]
