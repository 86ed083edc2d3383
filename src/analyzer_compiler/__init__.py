"""Compile repository-stored analyzer definitions into search engine analysis settings."""

from analyzer_compiler.analysis.compiler import AnalyzerCompiler, build_custom_analyzers, detect_mode
from analyzer_compiler.analysis.content import load_content
from analyzer_compiler.analysis.normalizer import normalize
from analyzer_compiler.analysis.output import (
    BuiltinAnalyzer,
    ComposedAnalyzer,
    FilterSpec,
    SettingsRegistry,
    TokenizerSpec,
)
from analyzer_compiler.config import CompilerSettings
from analyzer_compiler.errors import AnalyzerCompilerError, ConfigurationError, ContentLoadError


__all__ = [
    "AnalyzerCompiler",
    "AnalyzerCompilerError",
    "BuiltinAnalyzer",
    "CompilerSettings",
    "ComposedAnalyzer",
    "ConfigurationError",
    "ContentLoadError",
    "FilterSpec",
    "SettingsRegistry",
    "TokenizerSpec",
    "build_custom_analyzers",
    "detect_mode",
    "load_content",
    "normalize",
]
