"""
Tests for the Language Detector
===============================
"""

import pytest

from proofing.detector import DEFAULT_PROFILES, LanguageDetector, LanguageProfile
from proofing.models import Language


@pytest.fixture
def detector():
    return LanguageDetector()


class TestLanguageProfile:
    """Tests for per-language scoring."""

    def test_counts_every_diacritic(self):
        """Test that repeated diacritics are all counted."""
        profile = LanguageProfile(Language.TURKISH, diacritics=frozenset('çş'))
        assert profile.count_diacritics('çççş') == 4

    def test_common_words_match_whole_tokens(self):
        """Test that common words only count as whole tokens."""
        profile = LanguageProfile(Language.GERMAN, common_words=frozenset({'und'}))
        assert profile.count_common_words(['und', 'rund', 'und']) == 2

    def test_score_weights_diacritics(self):
        """Test score is 2 per diacritic plus 1 per common word."""
        profile = LanguageProfile(Language.GERMAN, diacritics=frozenset('ß'),
                                  common_words=frozenset({'die'}))
        assert profile.score('die Straße') == 3


class TestLanguageDetector:
    """Tests for LanguageDetector.detect()."""

    def test_empty_text_is_english(self, detector):
        assert detector.detect('') == Language.ENGLISH

    def test_none_text_is_english(self, detector):
        assert detector.detect(None) == Language.ENGLISH

    def test_ascii_text_is_english(self, detector):
        assert detector.detect('The quick brown fox jumps over the lazy dog') == Language.ENGLISH

    def test_ascii_capital_i_is_not_turkish(self, detector):
        """Test that ASCII 'I' does not count as a Turkish letter."""
        assert detector.detect('I think I can') == Language.ENGLISH

    def test_turkish_only_letter(self, detector):
        assert detector.detect('kız') == Language.TURKISH

    def test_turkish_sentence(self, detector):
        assert detector.detect('Bu akşam bir toplantı için buluşacağız') == Language.TURKISH

    def test_german_sentence(self, detector):
        assert detector.detect('Die Straße ist groß und schön') == Language.GERMAN

    def test_french_sentence(self, detector):
        assert detector.detect('Le café est très bon et la crème aussi') == Language.FRENCH

    def test_common_words_without_diacritics(self, detector):
        assert detector.detect('der Hund und die Katze') == Language.GERMAN

    def test_tie_prefers_turkish(self, detector):
        """Test ü scores equally for Turkish, German and French."""
        assert detector.detect('ü') == Language.TURKISH

    def test_tie_prefers_german_over_french(self, detector):
        assert detector.detect('ä') == Language.GERMAN

    def test_shared_common_word_tie(self, detector):
        """Test 'de' is common to Turkish and French."""
        assert detector.detect('de') == Language.TURKISH

    def test_detection_is_deterministic(self, detector):
        text = 'Le garçon und das Mädchen'
        assert len({detector.detect(text) for _ in range(10)}) == 1

    def test_scores_in_priority_order(self, detector):
        languages = [language for language, _ in detector.scores('hello')]
        assert languages == [Language.TURKISH, Language.GERMAN, Language.FRENCH, Language.ENGLISH]

    def test_english_always_scores_zero(self, detector):
        scores = dict(detector.scores('the and of to'))
        assert scores[Language.ENGLISH] == 0

    def test_custom_profiles(self):
        detector = LanguageDetector(profiles=(
            LanguageProfile(Language.GERMAN, diacritics=frozenset('ß')),
        ))
        assert detector.detect('groß') == Language.GERMAN
        assert detector.detect('çok') == Language.ENGLISH

    def test_default_profiles_exclude_english(self):
        assert Language.ENGLISH not in {profile.language for profile in DEFAULT_PROFILES}
