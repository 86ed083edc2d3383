"""Loading of line-oriented content blocks (stopword lists and friends)."""

from __future__ import annotations

from contextlib import ExitStack
import io
import logging

from analyzer_compiler.analysis.constants import JCR_CONTENT, JCR_DATA
from analyzer_compiler.errors import ConfigurationError, ContentLoadError
from analyzer_compiler.tree.model import Blob, ConfigNode, PropertyEntry, PropertyType


logger = logging.getLogger(__name__)


def is_content_node(node: ConfigNode) -> bool:
    """Return True when the node stores a binary content block."""
    return _data_property(node) is not None or _data_property(node.child_node(JCR_CONTENT)) is not None


def get_blob(node: ConfigNode, resource_name: str) -> Blob:
    """Resolve the blob of a file-like node.

    Content usually lives in ``jcr:content/jcr:data``; a ``jcr:data``
    property directly on the node is accepted as well.
    """
    entry = _data_property(node)
    if entry is None:
        content_node = node.child_node(JCR_CONTENT)
        if not content_node.exists():
            msg = f"Was expecting to find {JCR_CONTENT} node to read resource {resource_name}"
            raise ConfigurationError(msg)
        entry = _data_property(content_node)
        if entry is None:
            msg = f"Was expecting to find {JCR_CONTENT}/{JCR_DATA} property to read resource {resource_name}"
            raise ConfigurationError(msg)
    return entry.value


def load_content(node: ConfigNode, name: str, *, keep_blank_lines: bool = True) -> list[str]:
    """Read a content block as a list of trimmed lines.

    Every call re-opens the blob, so results are never shared between
    callers. Blank lines are kept as empty strings unless
    ``keep_blank_lines`` is False.

    Raises:
        ContentLoadError: The blob could not be read or is not valid UTF-8.
        ConfigurationError: The node does not carry a content block.
    """
    blob = get_blob(node, name)
    lines: list[str] = []
    try:
        with ExitStack() as stack:
            raw = stack.enter_context(blob.open())
            reader = stack.enter_context(io.TextIOWrapper(raw, encoding="utf-8"))
            for line in reader:
                word = line.strip()
                if word or keep_blank_lines:
                    lines.append(word)
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentLoadError(name) from exc

    logger.debug("Loaded %d lines from content node %s", len(lines), name)
    return lines


def _data_property(node: ConfigNode) -> PropertyEntry | None:
    entry = node.get_property(JCR_DATA)
    if entry is None or entry.type is not PropertyType.BINARY:
        return None
    return entry
