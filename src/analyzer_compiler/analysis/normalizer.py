"""Component name normalization."""

from __future__ import annotations


def normalize(value: str) -> str:
    """Normalize a fully-qualified class or short factory name.

    Accepts either form:

    - ``org.apache.lucene.analysis.en.EnglishAnalyzer`` -> ``english``
    - ``Standard`` -> ``standard``

    The last dot-separated segment is lowercased and every ``analyzer``
    occurrence removed, which yields the engine's naming convention.
    """
    name = value.rsplit(".", 1)[-1]
    return name.lower().replace("analyzer", "")
