"""Configuration tree model and loaders."""

from analyzer_compiler.tree.model import (
    MISSING_NODE,
    Blob,
    BytesBlob,
    ConfigNode,
    FileBlob,
    MemoryNode,
    PropertyEntry,
    PropertyType,
    entry_for,
    is_hidden,
)
from analyzer_compiler.tree.yaml_loader import load_tree, load_tree_file


__all__ = [
    "MISSING_NODE",
    "Blob",
    "BytesBlob",
    "ConfigNode",
    "FileBlob",
    "MemoryNode",
    "PropertyEntry",
    "PropertyType",
    "entry_for",
    "is_hidden",
    "load_tree",
    "load_tree_file",
]
