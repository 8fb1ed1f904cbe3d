"""
Language Detector
=================
Character-frequency heuristic for English, Turkish, German and French.

Each candidate language is scored as

    2 * (characters from its diacritic set) + (tokens in its common-word list)

English always scores 0 and wins only when every other score is 0.
Candidates are evaluated in a fixed priority order and the first maximum
is kept, so ties resolve to Turkish, then German, then French, then
English. Mixed-language text goes to whichever language accumulates the
higher weighted count; that is a known limit of the heuristic.
"""

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from .base import get_word_tokens
from .models import Language

DIACRITIC_WEIGHT = 2


@dataclass(frozen=True)
class LanguageProfile:
    """Diacritics and common function words that indicate a language."""
    language: Language
    diacritics: FrozenSet[str] = field(default_factory=frozenset)
    common_words: FrozenSet[str] = field(default_factory=frozenset)

    def count_diacritics(self, text: str) -> int:
        return sum(1 for ch in text if ch in self.diacritics)

    def count_common_words(self, tokens: Sequence[str]) -> int:
        return sum(1 for token in tokens if token in self.common_words)

    def score(self, text: str, tokens: Optional[Sequence[str]] = None) -> int:
        if tokens is None:
            tokens = get_word_tokens(text)
        return DIACRITIC_WEIGHT * self.count_diacritics(text) + self.count_common_words(tokens)


# Priority order doubles as the tie-break order
DEFAULT_PROFILES: Tuple[LanguageProfile, ...] = (
    LanguageProfile(
        Language.TURKISH,
        diacritics=frozenset('çğıöşüÇĞİÖŞÜ'),
        common_words=frozenset({'ve', 'bir', 'bu', 'da', 'de', 'ile', 'için', 'olan', 'olarak'}),
    ),
    LanguageProfile(
        Language.GERMAN,
        diacritics=frozenset('äöüßÄÖÜ'),
        common_words=frozenset({'und', 'der', 'die', 'das', 'in', 'den', 'von', 'mit', 'zu', 'auf'}),
    ),
    LanguageProfile(
        Language.FRENCH,
        diacritics=frozenset('àâäéèêëïîôöùûüÿçÀÂÄÉÈÊËÏÎÔÖÙÛÜŸÇ'),
        common_words=frozenset({'et', 'le', 'la', 'les', 'de', 'du', 'des', 'un', 'une', 'pour'}),
    ),
)

Scorer = Callable[[str, Sequence[str]], int]


def _english_score(text: str, tokens: Sequence[str]) -> int:
    return 0


class LanguageDetector:
    """Picks one Language for a text from an ordered list of scorers."""

    DEFAULT_LANGUAGE = Language.ENGLISH

    def __init__(self, profiles: Sequence[LanguageProfile] = DEFAULT_PROFILES):
        self.profiles = tuple(profiles)
        self._scorers: List[Tuple[Language, Scorer]] = [
            (profile.language, profile.score) for profile in self.profiles
        ]
        self._scorers.append((Language.ENGLISH, _english_score))

    def scores(self, text: str) -> List[Tuple[Language, int]]:
        """Score every language, in priority order."""
        text = text or ''
        tokens = get_word_tokens(text)
        return [(language, scorer(text, tokens)) for language, scorer in self._scorers]

    def detect(self, text: str) -> Language:
        scored = self.scores(text)
        if all(score == 0 for _, score in scored):
            return self.DEFAULT_LANGUAGE

        best_language, best_score = scored[0]
        for language, score in scored[1:]:
            if score > best_score:
                best_language, best_score = language, score
        return best_language
