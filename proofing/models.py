"""
Proofing Models
===============
Data classes for analysis requests, findings and results.

Results are frozen and hold tuples so that a result handed to a caller
cannot be changed afterwards. ``to_dict()`` produces the camelCase shape
the web client consumes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class Language(Enum):
    """Languages the detector can return."""
    ENGLISH = "English"
    TURKISH = "Turkish"
    GERMAN = "German"
    FRENCH = "French"

    @property
    def key(self) -> str:
        """Lower-case key used in pattern configuration files."""
        return self.name.lower()

    @classmethod
    def from_key(cls, key: str) -> 'Language':
        """Resolve a configuration key or display name to a Language."""
        normalized = key.strip().lower()
        for language in cls:
            if language.key == normalized:
                return language
        raise ValueError(f"Unknown language: {key!r}")


@dataclass(frozen=True)
class AnalysisRequest:
    """A document submitted for analysis."""
    title: str
    content: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisRequest':
        """Build a request from a JSON body, coercing missing fields to ''."""
        return cls(
            title=str(data.get('title') or ''),
            content=str(data.get('content') or ''),
        )


@dataclass(frozen=True)
class SpellingFinding:
    """A dictionary misspelling and its correction."""
    original: str
    corrected: str

    def to_dict(self) -> Dict[str, Any]:
        return {'original': self.original, 'corrected': self.corrected}


@dataclass(frozen=True)
class GrammarFinding:
    """
    One grammar rule match.

    ``corrected`` is the whole document with the rule's replacement
    applied to every match of that rule, not just the matched span.
    """
    original: str
    explanation: str
    corrected: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original': self.original,
            'explanation': self.explanation,
            'corrected': self.corrected,
        }


@dataclass(frozen=True)
class StyleSuggestion:
    """A phrase that has a preferred rewording."""
    original: str
    suggestion: str

    def to_dict(self) -> Dict[str, Any]:
        return {'original': self.original, 'suggestion': self.suggestion}


@dataclass(frozen=True)
class AnalysisResult:
    """Findings for a single document."""
    document_title: str
    language: Language
    spelling_errors: Tuple[SpellingFinding, ...] = field(default_factory=tuple)
    grammar_errors: Tuple[GrammarFinding, ...] = field(default_factory=tuple)
    style_suggestions: Tuple[StyleSuggestion, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls, title: str, language: Language = Language.ENGLISH) -> 'AnalysisResult':
        """Result with no findings, used when analysis could not run."""
        return cls(document_title=title, language=language)

    @property
    def issue_count(self) -> int:
        return len(self.spelling_errors) + len(self.grammar_errors) + len(self.style_suggestions)

    @property
    def has_issues(self) -> bool:
        return self.issue_count > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'documentTitle': self.document_title,
            'language': self.language.value,
            'spellingErrors': [f.to_dict() for f in self.spelling_errors],
            'grammarErrors': [f.to_dict() for f in self.grammar_errors],
            'styleSuggestions': [f.to_dict() for f in self.style_suggestions],
        }
