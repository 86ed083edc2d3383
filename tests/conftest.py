"""Shared test fixtures and configuration."""

from __future__ import annotations

import os

import pytest

from analyzer_compiler.tree.model import BytesBlob, MemoryNode, PropertyEntry, PropertyType


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep settings independent of the developer's environment and .env files."""
    for key in list(os.environ):
        if key.upper().startswith("ANALYZER_COMPILER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def content_file(text: str) -> MemoryNode:
    """nt:file style node: ``jcr:content/jcr:data`` holding ``text``."""
    data = PropertyEntry("jcr:data", PropertyType.BINARY, BytesBlob(text.encode("utf-8")))
    return MemoryNode(children={"jcr:content": MemoryNode([data])})


@pytest.fixture
def make_content():
    return content_file


@pytest.fixture
def composed_root():
    """Analyzers node with a composed default analyzer."""
    stop = MemoryNode.of(
        {"stop1.txt": content_file("a\nthe\n"), "stop2.txt": content_file("of\n")},
        words="stop1.txt, stop2.txt",
        ignoreCase="true",
    )
    default = MemoryNode(
        children={
            "charFilters": MemoryNode(children={"HTMLStrip": MemoryNode(), "Mapping": MemoryNode.of(mapping="x")}),
            "tokenizer": MemoryNode.of(name="Standard", maxTokenLength="255"),
            "filters": MemoryNode(
                children={
                    "LowerCase": MemoryNode(),
                    "Stop": stop,
                    "PorterStem": MemoryNode(),
                }
            ),
        }
    )
    return MemoryNode(children={"default": default})
