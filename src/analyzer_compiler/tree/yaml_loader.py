"""Build configuration trees from YAML documents.

Example document::

    default:
      tokenizer:
        name: Standard
      filters:
        LowerCase: {}
        Stop:
          words: stop1.txt
          stop1.txt:
            jcr:content:
              jcr:data: {$file: stopwords.txt}

Mappings become child nodes (document order is preserved), scalars become
string properties and sequences become array properties. Binary properties
are written either as ``!!binary`` scalars, ``{$binary: text}`` for inline
UTF-8 text, or ``{$file: path}`` for a file relative to the document.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from analyzer_compiler.errors import ConfigurationError
from analyzer_compiler.tree.model import BytesBlob, FileBlob, MemoryNode, PropertyEntry, PropertyType, entry_for


BINARY_KEY = "$binary"
FILE_KEY = "$file"


def load_tree(text: str, *, base_dir: Path | None = None) -> MemoryNode:
    """Parse a YAML document into a :class:`MemoryNode` tree."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid configuration document: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Configuration root must be a mapping, got {type(data).__name__}")
    return _build_node(data, base_dir or Path.cwd(), path="/")


def load_tree_file(path: Path | str) -> MemoryNode:
    """Read and parse a YAML configuration file."""
    source = Path(path)
    return load_tree(source.read_text(encoding="utf-8"), base_dir=source.parent)


def _build_node(data: Mapping[str, Any], base_dir: Path, path: str) -> MemoryNode:
    properties: list[PropertyEntry] = []
    children: dict[str, MemoryNode] = {}
    for raw_key, value in data.items():
        key = str(raw_key)
        child_path = f"{path.rstrip('/')}/{key}"
        if isinstance(value, Mapping):
            blob = _binary_value(value, base_dir, child_path)
            if blob is not None:
                properties.append(PropertyEntry(key, PropertyType.BINARY, blob))
            else:
                children[key] = _build_node(value, base_dir, child_path)
        elif value is None:
            raise ConfigurationError(f"Property {child_path} has no value")
        else:
            properties.append(entry_for(key, value))
    return MemoryNode(properties, children)


def _binary_value(value: Mapping[str, Any], base_dir: Path, path: str) -> BytesBlob | FileBlob | None:
    keys = set(value)
    if not keys & {BINARY_KEY, FILE_KEY}:
        return None
    if len(keys) != 1:
        raise ConfigurationError(f"Binary property {path} must define exactly one of {BINARY_KEY} or {FILE_KEY}")
    if BINARY_KEY in value:
        return BytesBlob(str(value[BINARY_KEY]).encode("utf-8"))
    return FileBlob(base_dir / str(value[FILE_KEY]))
