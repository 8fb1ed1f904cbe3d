r"""
Pattern Tables
==============
Per-language misspelling maps, grammar rules and style rules.

Everything here is immutable. ``default_pattern_config()`` builds the
tables shipped with Typopp; ``proofing.config`` overlays user files on top
of them. Declaration order is significant: checkers report findings in the
order the entries are declared.

Rule patterns use Python's Unicode ``\w``, so letters such as ç, ş or ü
are word characters (a JavaScript ``\w`` would stop at them).
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from re import Match, Pattern
from typing import Callable, List, Mapping, Tuple, Union

from .models import GrammarFinding, Language

Replacement = Union[str, Callable[[Match], str]]

RULE_FLAGS = re.IGNORECASE


def compile_rule_pattern(source: str) -> Pattern:
    """Compile a rule pattern with the flags every table rule uses."""
    return re.compile(source, RULE_FLAGS)


@dataclass(frozen=True)
class GrammarRule:
    """
    A regex grammar rule.

    Calling the rule on a text returns one finding per match. Every
    finding carries the same ``corrected`` value: the replacement applied
    across the entire text. Edits from other rules are never composed
    into it.
    """
    pattern: Pattern
    explanation: str
    replacement: Replacement

    def rewrite(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)

    def __call__(self, text: str) -> List[GrammarFinding]:
        matches = [m.group(0) for m in self.pattern.finditer(text)]
        if not matches:
            return []
        corrected = self.rewrite(text)
        return [
            GrammarFinding(original=original, explanation=self.explanation, corrected=corrected)
            for original in matches
        ]


@dataclass(frozen=True)
class StyleRule:
    """An exact phrase with a preferred rewording."""
    pattern: Pattern
    suggestion: str


@dataclass(frozen=True)
class PatternTable:
    """Spelling, grammar and style data for one language."""
    spelling: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    grammar: Tuple[GrammarRule, ...] = field(default_factory=tuple)
    style: Tuple[StyleRule, ...] = field(default_factory=tuple)


EMPTY_TABLE = PatternTable()


@dataclass(frozen=True)
class PatternConfig:
    """Read-only mapping of Language to PatternTable."""
    tables: Mapping[Language, PatternTable]

    def __post_init__(self):
        object.__setattr__(self, 'tables', MappingProxyType(dict(self.tables)))

    def table_for(self, language: Language) -> PatternTable:
        return self.tables.get(language, EMPTY_TABLE)

    def with_table(self, language: Language, table: PatternTable) -> 'PatternConfig':
        """Return a copy with one language's table replaced."""
        tables = dict(self.tables)
        tables[language] = table
        return PatternConfig(tables)


def _its_replacement(match: Match) -> str:
    return "it's" if match.group(0).lower() == 'its' else 'its'


def _grammar(source: str, explanation: str, replacement: Replacement) -> GrammarRule:
    return GrammarRule(compile_rule_pattern(source), explanation, replacement)


def _style(source: str, suggestion: str) -> StyleRule:
    return StyleRule(compile_rule_pattern(source), suggestion)


def default_pattern_config() -> PatternConfig:
    """Build the tables shipped with Typopp."""
    return PatternConfig({
        Language.ENGLISH: PatternTable(
            spelling=(
                ('recieve', 'receive'),
                ('seperate', 'separate'),
                ('occured', 'occurred'),
                ('begining', 'beginning'),
                ('definately', 'definitely'),
            ),
            grammar=(
                _grammar(r"\b(its|it's)\b",
                         'Check if possessive or contraction is intended',
                         _its_replacement),
            ),
            style=(
                _style(r'very good because it works fast',
                       'very good because it efficiently solves user problems'),
                _style(r'not bad overall', 'satisfactory overall'),
            ),
        ),
        Language.TURKISH: PatternTable(
            spelling=(
                ('yapıcaz', 'yapacağız'),
                ('gercekleşicek', 'gerçekleşecek'),
                ('katılcakmısın', 'katılacak mısın'),
                ('gelicek', 'gelecek'),
            ),
            grammar=(
                _grammar(r'(\w+)(mı|mi|mu|mü)(\s|$)', 'Soru eki ayrı yazılmalı', r'\1 \2\3'),
                _grammar(r'(\w+)(da|de|ta|te)(\s|$)', 'Ek ayrı yazılmalı', r'\1 \2\3'),
            ),
            style=(
                _style(r'genel olarak fena sayılmaz',
                       'genel olarak tatmin edici bir sonuç sunuyor'),
                _style(r'çok iyi çünkü hızlı çalışıyor',
                       'çok iyi çünkü kullanıcı sorunlarını hızlıca çözüyor'),
            ),
        ),
        Language.GERMAN: PatternTable(
            spelling=(
                ('daß', 'dass'),
                ('muß', 'muss'),
            ),
            grammar=(
                _grammar(r'(\w+)(nicht|kein|keine|keinen)(\s|$)',
                         'Negation word order check', r'\1 \2\3'),
            ),
            style=(
                _style(r'sehr gut weil es schnell funktioniert',
                       'sehr gut weil es Benutzerprobleme effizient löst'),
            ),
        ),
        Language.FRENCH: PatternTable(
            spelling=(
                ('acceuillir', 'accueillir'),
                ('bienvenu', 'bienvenue'),
            ),
            grammar=(
                _grammar(r'(\w+)(pas|plus|jamais)(\s|$)',
                         'Negation word order check', r'\1 \2\3'),
            ),
            style=(
                _style(r'très bien parce que ça marche vite',
                       'très bien parce que ça résout efficacement les problèmes des utilisateurs'),
            ),
        ),
    })
