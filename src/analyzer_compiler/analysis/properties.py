"""Translation of node properties into analyzer argument maps."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any

from analyzer_compiler.analysis.constants import IGNORE_PROP_NAMES
from analyzer_compiler.analysis.content import load_content
from analyzer_compiler.analysis.identity import ComponentIdentity, RemapRule, select_mapping
from analyzer_compiler.errors import ConfigurationError
from analyzer_compiler.tree.model import ConfigNode, PropertyEntry, is_hidden


logger = logging.getLogger(__name__)

ArgumentValue = str | list[str]


class PropertyMapper:
    """Convert a node's string properties into a keyed argument map.

    Binary, array, hidden and reserved properties are skipped. Keys are
    renamed by the first remap rule matching the component identity. A value
    whose comma-separated parts all name child nodes of the same node is
    replaced by the concatenated lines of those content blocks; any other
    value is passed through as the literal string.
    """

    def __init__(self, rules: Sequence[RemapRule] = (), *, keep_blank_lines: bool = True) -> None:
        self.rules = tuple(rules)
        self.keep_blank_lines = keep_blank_lines

    def map(self, node: ConfigNode, identity: ComponentIdentity | None = None) -> dict[str, ArgumentValue]:
        mapping = select_mapping(identity, self.rules)
        return convert_node(node, mapping, keep_blank_lines=self.keep_blank_lines)


def convert_node(
    node: ConfigNode,
    mapping: Mapping[str, str] | None = None,
    *,
    keep_blank_lines: bool = True,
) -> dict[str, ArgumentValue]:
    """Build the argument map of ``node`` using the given key ``mapping``."""
    mapping = mapping or {}
    args: dict[str, ArgumentValue] = {}
    for entry in node.list_properties():
        if not is_translatable(entry):
            continue
        key = mapping.get(entry.name, entry.name)
        if key in args:
            msg = f"Duplicate argument '{key}' after mapping property '{entry.name}'"
            raise ConfigurationError(msg)
        args[key] = resolve_value(node, entry.value, keep_blank_lines=keep_blank_lines)
    return args


def content_references(node: ConfigNode, value: str) -> list[str] | None:
    """Child names referenced by ``value``, or None when it is a literal.

    Every comma-separated part must name an existing child. An empty part
    (``""`` or a trailing separator as in ``"a,"``) keeps the whole value
    literal instead of being dropped.
    """
    refs = [part.strip() for part in value.split(",")]
    if not all(ref and node.has_child(ref) for ref in refs):
        return None
    return refs


def consumed_children(node: ConfigNode) -> set[str]:
    """Names of children that some translatable property dereferences."""
    consumed: set[str] = set()
    for entry in node.list_properties():
        if is_translatable(entry):
            consumed.update(content_references(node, entry.value) or ())
    return consumed


def resolve_value(node: ConfigNode, value: str, *, keep_blank_lines: bool = True) -> ArgumentValue:
    """Dereference ``value`` into content lines when it names child nodes.

    Dereferencing is all-or-nothing: ``"a,b"`` becomes the lines of ``a``
    followed by the lines of ``b`` only when both children exist.
    """
    # a trailing separator ("a,") leaves an empty part, so the value stays literal
    refs = content_references(node, value)
    if refs is None:
        return value

    lines: list[str] = []
    for ref in refs:
        lines.extend(load_content(node.child_node(ref), ref, keep_blank_lines=keep_blank_lines))
    logger.debug("Dereferenced %s into %d lines", refs, len(lines))
    return lines


def is_translatable(entry: PropertyEntry) -> bool:
    if entry.is_binary or entry.is_array:
        return False
    if is_hidden(entry.name):
        return False
    return entry.name not in IGNORE_PROP_NAMES


def merge_arguments(target: dict[str, Any], extra: Mapping[str, Any]) -> dict[str, Any]:
    """Add ``extra`` entries that are not already present in ``target``."""
    for key, value in extra.items():
        target.setdefault(key, value)
    return target
