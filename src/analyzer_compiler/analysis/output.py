"""Settings produced by the compiler.

The shapes map one-to-one onto the ``analysis`` block of the search
engine's index settings::

    {
        "analyzer": {"oak_analyzer": {"type": "custom", "tokenizer": ..., "filter": [...], "char_filter": [...]}},
        "tokenizer": {"custom_tokenizer": {"type": "standard"}},
        "filter": {"lowercase_0": {"type": "lowercase"}},
        "char_filter": {},
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from analyzer_compiler.analysis.constants import ANALYZER_TYPE, CUSTOM_ANALYZER_TYPE
from analyzer_compiler.analysis.identity import ComponentKind


@dataclass(frozen=True)
class TokenizerSpec:
    """Tokenizer definition referenced by a composed analyzer."""

    identifier: str
    name: str
    args: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {**self.args, ANALYZER_TYPE: self.name}


@dataclass(frozen=True)
class FilterSpec:
    """Token filter or char filter definition."""

    identifier: str
    name: str
    args: dict[str, Any]
    ordinal: int
    kind: ComponentKind = ComponentKind.TOKEN_FILTER

    def to_dict(self) -> dict[str, Any]:
        return {**self.args, ANALYZER_TYPE: self.name}


@dataclass(frozen=True)
class BuiltinAnalyzer:
    """Pre-packaged analyzer selected by type, with optional parameters."""

    type: str
    args: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**self.args, ANALYZER_TYPE: self.type}


@dataclass(frozen=True)
class ComposedAnalyzer:
    """Analyzer assembled from one tokenizer and ordered filter stages."""

    tokenizer_id: str
    filter_ids: tuple[str, ...] = ()
    char_filter_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            ANALYZER_TYPE: CUSTOM_ANALYZER_TYPE,
            "tokenizer": self.tokenizer_id,
            "filter": list(self.filter_ids),
            "char_filter": list(self.char_filter_ids),
        }


AnalyzerOutput = BuiltinAnalyzer | ComposedAnalyzer


@dataclass(frozen=True)
class SettingsRegistry:
    """One named analyzer plus the stage definitions it references."""

    analyzer_name: str
    analyzer: AnalyzerOutput
    tokenizers: tuple[TokenizerSpec, ...] = ()
    filters: tuple[FilterSpec, ...] = ()
    char_filters: tuple[FilterSpec, ...] = ()

    @property
    def is_builtin(self) -> bool:
        return isinstance(self.analyzer, BuiltinAnalyzer)

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the engine's ``analysis`` settings block."""
        data: dict[str, Any] = {"analyzer": {self.analyzer_name: self.analyzer.to_dict()}}
        if self.tokenizers:
            data["tokenizer"] = {spec.identifier: spec.to_dict() for spec in self.tokenizers}
        if self.filters:
            data["filter"] = {spec.identifier: spec.to_dict() for spec in self.filters}
        if self.char_filters:
            data["char_filter"] = {spec.identifier: spec.to_dict() for spec in self.char_filters}
        return data
