"""Read-only configuration tree primitives.

The compiler never talks to a repository directly. It only needs a node
abstraction exposing ordered children and typed properties, mirroring the
hierarchical node model the analyzer definitions are authored in.
:class:`MemoryNode` is the in-process implementation used by the YAML loader
and the tests; storage layers can provide their own :class:`ConfigNode`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
import io
from pathlib import Path
from typing import Any, BinaryIO, Protocol


HIDDEN_PREFIX = ":"


class PropertyType(str, Enum):
    """Declared types a node property can carry."""

    STRING = "string"
    ARRAY = "array"
    BINARY = "binary"


class Blob(Protocol):
    """Binary value that can be opened repeatedly."""

    def open(self) -> BinaryIO:  # pragma: no cover - interface definition
        """Return a fresh stream positioned at the start of the content."""
        ...


@dataclass(frozen=True)
class BytesBlob:
    """Blob backed by an in-memory byte string."""

    data: bytes

    def open(self) -> BinaryIO:
        return io.BytesIO(self.data)


@dataclass(frozen=True)
class FileBlob:
    """Blob backed by a file on disk, opened lazily."""

    path: Path

    def open(self) -> BinaryIO:
        return self.path.open("rb")


@dataclass(frozen=True)
class PropertyEntry:
    """Named, typed property attached to a node."""

    name: str
    type: PropertyType
    value: Any

    @property
    def is_array(self) -> bool:
        return self.type is PropertyType.ARRAY

    @property
    def is_binary(self) -> bool:
        return self.type is PropertyType.BINARY


def is_hidden(name: str) -> bool:
    """Hidden (internal) names are never exposed as analyzer arguments."""
    return name.startswith(HIDDEN_PREFIX)


class ConfigNode(Protocol):
    """Capability the compiler needs from the configuration store."""

    def exists(self) -> bool:  # pragma: no cover - interface definition
        ...

    def child_node(self, name: str) -> ConfigNode:  # pragma: no cover - interface definition
        ...

    def has_child(self, name: str) -> bool:  # pragma: no cover - interface definition
        ...

    def list_children(self) -> Iterable[tuple[str, ConfigNode]]:  # pragma: no cover - interface definition
        ...

    def list_properties(self) -> Iterable[PropertyEntry]:  # pragma: no cover - interface definition
        ...

    def get_property(self, name: str) -> PropertyEntry | None:  # pragma: no cover - interface definition
        ...

    def get_string(self, name: str) -> str | None:  # pragma: no cover - interface definition
        ...


class MemoryNode:
    """In-memory node preserving insertion order of children and properties."""

    def __init__(
        self,
        properties: Iterable[PropertyEntry] | None = None,
        children: Mapping[str, MemoryNode] | None = None,
    ) -> None:
        self._properties: dict[str, PropertyEntry] = {}
        for entry in properties or ():
            self._properties[entry.name] = entry
        self._children: dict[str, MemoryNode] = dict(children or {})

    @classmethod
    def of(cls, children: Mapping[str, MemoryNode] | None = None, **properties: Any) -> MemoryNode:
        """Build a node from keyword properties, inferring each property type."""
        return cls([entry_for(name, value) for name, value in properties.items()], children)

    def exists(self) -> bool:
        return True

    def child_node(self, name: str) -> ConfigNode:
        return self._children.get(name, MISSING_NODE)

    def has_child(self, name: str) -> bool:
        return name in self._children

    def list_children(self) -> Iterator[tuple[str, ConfigNode]]:
        return iter(list(self._children.items()))

    def list_properties(self) -> Iterator[PropertyEntry]:
        return iter(list(self._properties.values()))

    def get_property(self, name: str) -> PropertyEntry | None:
        return self._properties.get(name)

    def get_string(self, name: str) -> str | None:
        entry = self._properties.get(name)
        if entry is None or entry.type is not PropertyType.STRING:
            return None
        return entry.value

    def __repr__(self) -> str:
        return f"MemoryNode(properties={list(self._properties)}, children={list(self._children)})"


class _MissingNode:
    """Node returned for absent children; every lookup comes back empty."""

    def exists(self) -> bool:
        return False

    def child_node(self, name: str) -> ConfigNode:
        return self

    def has_child(self, name: str) -> bool:
        return False

    def list_children(self) -> Iterator[tuple[str, ConfigNode]]:
        return iter(())

    def list_properties(self) -> Iterator[PropertyEntry]:
        return iter(())

    def get_property(self, name: str) -> PropertyEntry | None:
        return None

    def get_string(self, name: str) -> str | None:
        return None

    def __repr__(self) -> str:
        return "MISSING_NODE"


MISSING_NODE: ConfigNode = _MissingNode()


def entry_for(name: str, value: Any) -> PropertyEntry:
    """Create a property entry, picking the type from the Python value."""
    if isinstance(value, (bytes, bytearray)):
        return PropertyEntry(name, PropertyType.BINARY, BytesBlob(bytes(value)))
    if isinstance(value, (BytesBlob, FileBlob)):
        return PropertyEntry(name, PropertyType.BINARY, value)
    if isinstance(value, (list, tuple)):
        return PropertyEntry(name, PropertyType.ARRAY, [_stringify(item) for item in value])
    return PropertyEntry(name, PropertyType.STRING, _stringify(value))


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
