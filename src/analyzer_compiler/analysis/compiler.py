"""Compile repository-stored analyzer definitions into engine analysis settings.

An analyzer definition lives under the ``default`` child of an analyzers
node and takes one of two shapes:

* **built-in** - the node carries a ``class`` (or ``name``) marker naming a
  pre-packaged analyzer such as ``org.apache.lucene.analysis.en.EnglishAnalyzer``.
  Remaining properties become analyzer parameters.
* **composed** - no marker; the node has a ``tokenizer`` child plus optional
  ``filters`` and ``charFilters`` children whose declaration order is the
  pipeline order.

The mode is decided once by :func:`detect_mode`; the two resolvers never
look at each other's nodes.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from analyzer_compiler.analysis.constants import (
    ANALYZER_TYPE,
    ANL_CHAR_FILTERS,
    ANL_CLASS,
    ANL_DEFAULT,
    ANL_FILTERS,
    ANL_NAME,
    ANL_TOKENIZER,
    STRUCTURAL_CHILDREN,
)
from analyzer_compiler.analysis.content import is_content_node, load_content
from analyzer_compiler.analysis.identity import (
    CHAR_FILTERS,
    DEFAULT_REMAP_RULES,
    TOKEN_FILTERS,
    IdentityResolver,
    RemapRule,
)
from analyzer_compiler.analysis.normalizer import normalize
from analyzer_compiler.analysis.output import (
    BuiltinAnalyzer,
    ComposedAnalyzer,
    FilterSpec,
    SettingsRegistry,
    TokenizerSpec,
)
from analyzer_compiler.analysis.properties import PropertyMapper, consumed_children, merge_arguments
from analyzer_compiler.config import CompilerSettings
from analyzer_compiler.errors import ConfigurationError
from analyzer_compiler.observability.context import analyzer_context
from analyzer_compiler.observability.tracing import create_span


if TYPE_CHECKING:
    from collections.abc import Sequence

    from analyzer_compiler.tree.model import ConfigNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuiltinMode:
    """Definition selects a pre-packaged analyzer by ``marker``."""

    marker: str


@dataclass(frozen=True)
class ComposedMode:
    """Definition assembles tokenizer and filter stages."""


AnalyzerMode = BuiltinMode | ComposedMode


def detect_mode(node: ConfigNode) -> AnalyzerMode:
    """Pick the construction mode; the class marker wins over the name marker."""
    marker = node.get_string(ANL_CLASS)
    if marker is None:
        marker = node.get_string(ANL_NAME)
    if marker is None:
        return ComposedMode()
    return BuiltinMode(marker)


class AnalyzerCompiler:
    """Translate one analyzer definition into a :class:`SettingsRegistry`.

    Instances hold configuration only; every :meth:`compile` call builds its
    results from scratch so a compiler can be shared freely.
    """

    def __init__(
        self,
        settings: CompilerSettings | None = None,
        *,
        token_filters: IdentityResolver = TOKEN_FILTERS,
        char_filters: IdentityResolver = CHAR_FILTERS,
        remap_rules: Sequence[RemapRule] = DEFAULT_REMAP_RULES,
    ) -> None:
        self.settings = settings or CompilerSettings()
        self.token_filters = token_filters
        self.char_filters = char_filters
        self._keep_blank_lines = self.settings.keep_blank_content_lines
        self._plain_mapper = PropertyMapper(keep_blank_lines=self._keep_blank_lines)
        self._remapping_mapper = PropertyMapper(remap_rules, keep_blank_lines=self._keep_blank_lines)

    def compile(self, root: ConfigNode | None, analyzer_name: str) -> SettingsRegistry | None:
        """Compile the ``default`` analyzer below ``root``.

        Returns None when there is no analyzer definition to build. Any
        failure aborts the whole compilation; no partial registry escapes.
        """
        if root is None:
            return None
        definition = root.child_node(ANL_DEFAULT)
        if not definition.exists():
            logger.info("No %s analyzer configured for %s", ANL_DEFAULT, analyzer_name)
            return None

        mode = detect_mode(definition)
        with (
            analyzer_context(analyzer_name),
            create_span("analyzer.compile", attributes={"analyzer.name": analyzer_name}) as span,
        ):
            if isinstance(mode, BuiltinMode):
                span.set_attribute("analyzer.mode", "builtin")
                registry = self._compile_builtin(definition, analyzer_name, mode)
            else:
                span.set_attribute("analyzer.mode", "composed")
                registry = self._compile_composed(definition, analyzer_name)
        return registry

    def _compile_builtin(self, node: ConfigNode, analyzer_name: str, mode: BuiltinMode) -> SettingsRegistry:
        analyzer_type = normalize(mode.marker)
        if not analyzer_type:
            raise ConfigurationError(f"Analyzer marker '{mode.marker}' does not name an analyzer")

        args = self._plain_mapper.map(node)
        merge_arguments(args, self._load_content_children(node))
        args[ANALYZER_TYPE] = analyzer_type

        logger.debug("Compiled built-in analyzer %s as %s with %d parameters", analyzer_name, analyzer_type, len(args) - 1)
        return SettingsRegistry(analyzer_name=analyzer_name, analyzer=BuiltinAnalyzer(analyzer_type, args))

    def _load_content_children(self, node: ConfigNode) -> dict[str, list[str]]:
        """Content children of a built-in definition, e.g. a ``stopwords`` file.

        Children already dereferenced by a property are skipped.
        """
        consumed = consumed_children(node)
        content: dict[str, list[str]] = {}
        sources: dict[str, str] = {}
        for child_name, child in node.list_children():
            if child_name in STRUCTURAL_CHILDREN or child_name in consumed or not is_content_node(child):
                continue
            key = normalize(child_name)
            if key in content:
                msg = f"Content nodes '{sources[key]}' and '{child_name}' both map to argument '{key}'"
                raise ConfigurationError(msg)
            sources[key] = child_name
            content[key] = load_content(child, child_name, keep_blank_lines=self._keep_blank_lines)
        return content

    def _compile_composed(self, node: ConfigNode, analyzer_name: str) -> SettingsRegistry:
        tokenizer = self._load_tokenizer(node.child_node(ANL_TOKENIZER))
        filters = self._load_filters(node.child_node(ANL_FILTERS), self.token_filters)
        char_filters = self._load_filters(node.child_node(ANL_CHAR_FILTERS), self.char_filters)

        analyzer = ComposedAnalyzer(
            tokenizer_id=tokenizer.identifier,
            filter_ids=tuple(spec.identifier for spec in filters),
            char_filter_ids=tuple(spec.identifier for spec in char_filters),
        )
        logger.debug(
            "Compiled composed analyzer %s: tokenizer=%s filters=%d char_filters=%d",
            analyzer_name,
            tokenizer.name,
            len(filters),
            len(char_filters),
        )
        return SettingsRegistry(
            analyzer_name=analyzer_name,
            analyzer=analyzer,
            tokenizers=(tokenizer,),
            filters=filters,
            char_filters=char_filters,
        )

    def _load_tokenizer(self, node: ConfigNode) -> TokenizerSpec:
        raw_name = node.get_string(ANL_NAME)
        if not raw_name:
            raise ConfigurationError(f"Composed analyzer requires a '{ANL_TOKENIZER}' node with a '{ANL_NAME}' property")
        name = normalize(raw_name)
        args = self._plain_mapper.map(node)
        args[ANALYZER_TYPE] = name
        return TokenizerSpec(identifier=self.settings.tokenizer_id, name=name, args=args)

    def _load_filters(self, node: ConfigNode, resolver: IdentityResolver) -> tuple[FilterSpec, ...]:
        specs: list[FilterSpec] = []
        for ordinal, (child_name, child) in enumerate(node.list_children()):
            name = normalize(child_name)
            identity = resolver.resolve(name)
            args = self._remapping_mapper.map(child, identity)
            args[ANALYZER_TYPE] = name
            specs.append(
                FilterSpec(
                    identifier=f"{name}_{ordinal}",
                    name=name,
                    args=args,
                    ordinal=ordinal,
                    kind=identity.kind,
                )
            )
        return tuple(specs)


def build_custom_analyzers(
    root: ConfigNode | None,
    analyzer_name: str,
    settings: CompilerSettings | None = None,
) -> SettingsRegistry | None:
    """Compile the default analyzer of ``root`` with the stock registries."""
    return AnalyzerCompiler(settings).compile(root, analyzer_name)
