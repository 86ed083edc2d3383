"""Component identity registry.

Analyzer definitions name their tokenizer, token filters and char filters by
their factory names. Translating arguments sometimes depends on *what kind*
of component a name refers to (a stop filter reads its word list from
``words`` while the target engine expects ``stopwords``). The registries in
this module map normalized names to a :class:`ComponentIdentity` carrying a
closed set of :class:`IdentityTag` values; remap rules match on those tags
instead of walking a class hierarchy.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from analyzer_compiler.errors import ConfigurationError


class ComponentKind(str, Enum):
    """Pipeline stage a component plugs into."""

    TOKEN_FILTER = "token_filter"
    CHAR_FILTER = "char_filter"


class IdentityTag(str, Enum):
    """Traits shared by families of components."""

    WORDS_FILE = "words_file"
    KEEP_WORDS = "keep_words"
    COMMON_GRAMS = "common_grams"
    STEMMER = "stemmer"
    SYNONYM = "synonym"
    PATTERN = "pattern"
    MAPPING = "mapping"


@dataclass(frozen=True)
class ComponentIdentity:
    """Resolved identity of a named analysis component."""

    name: str
    kind: ComponentKind
    factory: str
    tags: frozenset[IdentityTag] = field(default_factory=frozenset)

    def has_tag(self, tag: IdentityTag) -> bool:
        return tag in self.tags


class IdentityResolver(Protocol):
    """Resolves a normalized component name to its identity."""

    def resolve(self, name: str) -> ComponentIdentity:  # pragma: no cover - interface definition
        ...


class StaticIdentityResolver:
    """Resolver backed by an enumerated registry of known components."""

    def __init__(self, kind: ComponentKind, registry: Mapping[str, ComponentIdentity]) -> None:
        self.kind = kind
        self._registry = {name.lower(): identity for name, identity in registry.items()}

    def resolve(self, name: str) -> ComponentIdentity:
        identity = self._registry.get(name.lower())
        if identity is None:
            msg = f"A {self.kind.value} with name '{name}' does not exist. Known: {sorted(self._registry)}"
            raise ConfigurationError(msg)
        return identity

    def names(self) -> list[str]:
        return sorted(self._registry)


def _registry(kind: ComponentKind, entries: Iterable[tuple[str, str, Sequence[IdentityTag]]]) -> dict[str, ComponentIdentity]:
    return {name: ComponentIdentity(name, kind, factory, frozenset(tags)) for name, factory, tags in entries}


TOKEN_FILTER_IDENTITIES = _registry(
    ComponentKind.TOKEN_FILTER,
    [
        ("apostrophe", "ApostropheFilterFactory", ()),
        ("asciifolding", "ASCIIFoldingFilterFactory", ()),
        ("capitalization", "CapitalizationFilterFactory", ()),
        ("cjkbigram", "CJKBigramFilterFactory", ()),
        ("cjkwidth", "CJKWidthFilterFactory", ()),
        ("classic", "ClassicFilterFactory", ()),
        ("commongrams", "CommonGramsFilterFactory", (IdentityTag.COMMON_GRAMS, IdentityTag.WORDS_FILE)),
        ("commongramsquery", "CommonGramsQueryFilterFactory", (IdentityTag.COMMON_GRAMS, IdentityTag.WORDS_FILE)),
        ("decimaldigit", "DecimalDigitFilterFactory", ()),
        ("delimitedpayload", "DelimitedPayloadTokenFilterFactory", ()),
        ("dictionarycompoundword", "DictionaryCompoundWordTokenFilterFactory", ()),
        ("edgengram", "EdgeNGramFilterFactory", ()),
        ("elision", "ElisionFilterFactory", ()),
        ("englishminimalstem", "EnglishMinimalStemFilterFactory", (IdentityTag.STEMMER,)),
        ("englishpossessive", "EnglishPossessiveFilterFactory", ()),
        ("fingerprint", "FingerprintFilterFactory", ()),
        ("flattengraph", "FlattenGraphFilterFactory", ()),
        ("frenchlightstem", "FrenchLightStemFilterFactory", (IdentityTag.STEMMER,)),
        ("germannormalization", "GermanNormalizationFilterFactory", ()),
        ("germanstem", "GermanStemFilterFactory", (IdentityTag.STEMMER,)),
        ("hunspellstem", "HunspellStemFilterFactory", (IdentityTag.STEMMER,)),
        ("hyphenatedwords", "HyphenatedWordsFilterFactory", ()),
        ("hyphenationcompoundword", "HyphenationCompoundWordTokenFilterFactory", ()),
        ("keepword", "KeepWordFilterFactory", (IdentityTag.KEEP_WORDS, IdentityTag.WORDS_FILE)),
        ("keywordmarker", "KeywordMarkerFilterFactory", ()),
        ("keywordrepeat", "KeywordRepeatFilterFactory", ()),
        ("kstem", "KStemFilterFactory", (IdentityTag.STEMMER,)),
        ("length", "LengthFilterFactory", ()),
        ("limittokencount", "LimitTokenCountFilterFactory", ()),
        ("lowercase", "LowerCaseFilterFactory", ()),
        ("ngram", "NGramFilterFactory", ()),
        ("patterncapturegroup", "PatternCaptureGroupFilterFactory", (IdentityTag.PATTERN,)),
        ("patternreplace", "PatternReplaceFilterFactory", (IdentityTag.PATTERN,)),
        ("porterstem", "PorterStemFilterFactory", (IdentityTag.STEMMER,)),
        ("removeduplicates", "RemoveDuplicatesTokenFilterFactory", ()),
        ("reversestring", "ReverseStringFilterFactory", ()),
        ("shingle", "ShingleFilterFactory", ()),
        ("snowballporter", "SnowballPorterFilterFactory", (IdentityTag.STEMMER,)),
        ("stemmeroverride", "StemmerOverrideFilterFactory", (IdentityTag.STEMMER,)),
        ("stop", "StopFilterFactory", (IdentityTag.WORDS_FILE,)),
        ("synonym", "SynonymFilterFactory", (IdentityTag.SYNONYM,)),
        ("synonymgraph", "SynonymGraphFilterFactory", (IdentityTag.SYNONYM,)),
        ("trim", "TrimFilterFactory", ()),
        ("truncate", "TruncateTokenFilterFactory", ()),
        ("type", "TypeTokenFilterFactory", ()),
        ("uppercase", "UpperCaseFilterFactory", ()),
        ("worddelimiter", "WordDelimiterFilterFactory", ()),
        ("worddelimitergraph", "WordDelimiterGraphFilterFactory", ()),
    ],
)

CHAR_FILTER_IDENTITIES = _registry(
    ComponentKind.CHAR_FILTER,
    [
        ("htmlstrip", "HTMLStripCharFilterFactory", ()),
        ("mapping", "MappingCharFilterFactory", (IdentityTag.MAPPING,)),
        ("patternreplace", "PatternReplaceCharFilterFactory", (IdentityTag.PATTERN,)),
        ("persian", "PersianCharFilterFactory", ()),
    ],
)

TOKEN_FILTERS = StaticIdentityResolver(ComponentKind.TOKEN_FILTER, TOKEN_FILTER_IDENTITIES)
CHAR_FILTERS = StaticIdentityResolver(ComponentKind.CHAR_FILTER, CHAR_FILTER_IDENTITIES)


@dataclass(frozen=True)
class RemapRule:
    """Argument key renames applied to components matching ``predicate``."""

    predicate: Callable[[ComponentIdentity], bool]
    mapping: Mapping[str, str]
    description: str = ""


def tagged(tag: IdentityTag) -> Callable[[ComponentIdentity], bool]:
    """Predicate matching identities that carry ``tag``."""

    def matches(identity: ComponentIdentity) -> bool:
        return identity.has_tag(tag)

    return matches


# Evaluated top to bottom, first match wins: the narrower word-list
# families must come before the generic WORDS_FILE rule.
DEFAULT_REMAP_RULES: tuple[RemapRule, ...] = (
    RemapRule(tagged(IdentityTag.KEEP_WORDS), {"words": "keep_words"}, "keep word lists"),
    RemapRule(tagged(IdentityTag.COMMON_GRAMS), {"words": "common_words"}, "common grams word lists"),
    RemapRule(tagged(IdentityTag.WORDS_FILE), {"words": "stopwords"}, "stop word lists"),
)


def select_mapping(identity: ComponentIdentity | None, rules: Sequence[RemapRule]) -> Mapping[str, str]:
    """Return the key mapping of the first rule matching ``identity``."""
    if identity is None:
        return {}
    for rule in rules:
        if rule.predicate(identity):
            return rule.mapping
    return {}
