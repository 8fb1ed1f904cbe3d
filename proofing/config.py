"""
Proofing Configuration Module
=============================
Builds the pattern tables and checker settings the analyzer is
constructed with.

Configuration can be set via:
1. Environment variables (TYPOPP_GRAMMAR_ENABLED=false)
2. A JSON patterns file (TYPOPP_PATTERNS_FILE=/etc/typopp/patterns.json)

Patterns file layout, one object per language key (english, turkish,
german, french); every section is optional and replaces the matching
default section when present:

    {
      "english": {
        "spelling": {"teh": "the"},
        "grammar": [{"pattern": "\\\\b(alot)\\\\b", "explanation": "...", "replacement": "a lot"}],
        "style": [{"pattern": "at this point in time", "suggestion": "now"}]
      }
    }
"""

import os
import re
import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from config_logging import ValidationError, get_logger

from .models import Language
from .patterns import (
    GrammarRule, PatternConfig, PatternTable, StyleRule,
    compile_rule_pattern, default_pattern_config,
)

__version__ = "1.0.0"

PATTERNS_FILE_ENV = 'TYPOPP_PATTERNS_FILE'

_logger = get_logger('proofing.config')


@dataclass(frozen=True)
class CheckerSettings:
    """Which checkers run during analysis."""
    spelling_enabled: bool = True
    grammar_enabled: bool = True
    style_enabled: bool = True

    @classmethod
    def from_env(cls) -> 'CheckerSettings':
        return cls(
            spelling_enabled=_parse_bool(os.environ.get('TYPOPP_SPELLING_ENABLED', 'true')),
            grammar_enabled=_parse_bool(os.environ.get('TYPOPP_GRAMMAR_ENABLED', 'true')),
            style_enabled=_parse_bool(os.environ.get('TYPOPP_STYLE_ENABLED', 'true')),
        )


def _parse_bool(value: str) -> bool:
    """Parse boolean from string."""
    return value.lower() in ('true', '1', 'yes', 'on')


def load_pattern_config(path: Optional[Union[str, Path]] = None) -> PatternConfig:
    """
    Build the PatternConfig: defaults, overlaid with a patterns file.

    ``path`` falls back to $TYPOPP_PATTERNS_FILE. With neither set, the
    defaults are returned unchanged.
    """
    config = default_pattern_config()
    path = path or os.environ.get(PATTERNS_FILE_ENV)
    if not path:
        return config

    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ValidationError(f"Patterns file not found: {path}", field=PATTERNS_FILE_ENV)
    except (json.JSONDecodeError, OSError) as e:
        raise ValidationError(f"Could not read patterns file {path}: {e}", field=PATTERNS_FILE_ENV)

    config = apply_pattern_overrides(config, data)
    _logger.info("Loaded pattern overrides", path=str(path), languages=sorted(data))
    return config


def apply_pattern_overrides(config: PatternConfig, data: Dict[str, Any]) -> PatternConfig:
    """Return a new PatternConfig with the sections in ``data`` replaced."""
    if not isinstance(data, dict):
        raise ValidationError("Patterns file must contain a JSON object")

    for key, section in data.items():
        try:
            language = Language.from_key(key)
        except ValueError as e:
            raise ValidationError(str(e), field=key)
        if not isinstance(section, dict):
            raise ValidationError(f"Patterns for {key} must be an object", field=key)
        table = _apply_section(config.table_for(language), section, key)
        config = config.with_table(language, table)
    return config


def _apply_section(table: PatternTable, section: Dict[str, Any], key: str) -> PatternTable:
    try:
        if 'spelling' in section:
            table = replace(table, spelling=tuple(
                (str(incorrect), str(correct)) for incorrect, correct in section['spelling'].items()
            ))
        if 'grammar' in section:
            table = replace(table, grammar=tuple(
                _grammar_rule(rule, key) for rule in section['grammar']
            ))
        if 'style' in section:
            table = replace(table, style=tuple(
                StyleRule(compile_rule_pattern(rule['pattern']), rule['suggestion'])
                for rule in section['style']
            ))
    except re.error as e:
        raise ValidationError(f"Invalid pattern for {key}: {e}", field=key)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValidationError(f"Malformed patterns for {key}: {e}", field=key)
    return table


def _grammar_rule(rule: Dict[str, Any], key: str) -> GrammarRule:
    pattern = compile_rule_pattern(rule['pattern'])
    replacement = rule['replacement']
    if not isinstance(replacement, str):
        raise ValidationError(f"Grammar replacement for {key} must be a string", field=key)
    try:
        _empty_match(pattern).expand(replacement)
    except (re.error, IndexError) as e:
        raise ValidationError(
            f"Invalid grammar replacement {replacement!r} for {key}: {e}", field=key
        )
    return GrammarRule(pattern, rule['explanation'], replacement)


def _empty_match(pattern: re.Pattern) -> re.Match:
    """A match against '' with the same numbered and named groups as ``pattern``."""
    names = {index: name for name, index in pattern.groupindex.items()}
    groups = ''.join(
        f'(?P<{names[index]}>)' if index in names else '()'
        for index in range(1, pattern.groups + 1)
    )
    return re.compile(groups).match('')
