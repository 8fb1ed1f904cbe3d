"""
Proofing Base Classes
=====================
Defines the interface all language checkers implement.

A checker receives the raw document text and the PatternTable of the
detected language, and returns an ordered list of findings. Checkers hold
no per-document state, so one instance can serve concurrent requests.
"""

from typing import Any, Dict, List, Optional

from config_logging import AnalysisError, get_logger

from .patterns import PatternTable

__version__ = "1.0.0"

_logger = get_logger('proofing')


class BaseChecker:
    """
    Base class for spelling, grammar and style checkers.

    Subclasses implement ``_check_impl`` and set CHECKER_NAME and CATEGORY.
    """

    CHECKER_NAME = "Base"
    CHECKER_VERSION = "1.0.0"
    CATEGORY = ""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def _check_impl(self, text: str, table: PatternTable) -> List[Any]:
        raise NotImplementedError("Subclasses must implement _check_impl()")

    def check(self, text: str, table: PatternTable) -> List[Any]:
        """
        Run the check on document text.

        Raises AnalysisError if pattern evaluation fails.
        """
        if not self.enabled or not text:
            return []
        try:
            return self._check_impl(text, table)
        except AnalysisError:
            raise
        except Exception as e:
            raise AnalysisError(f"{self.CHECKER_NAME} failed: {e}", checker=self.CHECKER_NAME) from e

    def safe_check(self, text: str, table: PatternTable) -> List[Any]:
        """Run check, logging failures and returning no findings instead of raising."""
        try:
            return self.check(text, table)
        except AnalysisError as e:
            _logger.warning(e.message, checker=self.CHECKER_NAME, error_code=e.code)
            return []

    def get_status(self) -> Dict[str, Any]:
        return {
            'name': self.CHECKER_NAME,
            'version': self.CHECKER_VERSION,
            'category': self.CATEGORY,
            'enabled': self.enabled,
        }


def get_word_tokens(text: Optional[str]) -> List[str]:
    """Lower-case and whitespace-split text, dropping empty tokens."""
    if not text:
        return []
    return text.lower().split()
