"""Unit tests for analyzer compilation (built-in and composed modes)."""

import json
import logging

import pytest

from analyzer_compiler.analysis import compiler as compiler_module
from analyzer_compiler.analysis.compiler import (
    AnalyzerCompiler,
    BuiltinMode,
    ComposedMode,
    build_custom_analyzers,
    detect_mode,
)
from analyzer_compiler.analysis.identity import ComponentKind
from analyzer_compiler.analysis.output import BuiltinAnalyzer, ComposedAnalyzer
from analyzer_compiler.config import CompilerSettings
from analyzer_compiler.errors import ConfigurationError, ContentLoadError
from analyzer_compiler.observability import JsonFormatter, get_trace_context
from analyzer_compiler.tree.model import FileBlob, MemoryNode, PropertyEntry, PropertyType


def _analyzers(default: MemoryNode) -> MemoryNode:
    return MemoryNode(children={"default": default})


def _composed(filters: dict | None = None, char_filters: dict | None = None, **tokenizer) -> MemoryNode:
    children = {"tokenizer": MemoryNode.of(**(tokenizer or {"name": "Standard"}))}
    if filters is not None:
        children["filters"] = MemoryNode(children=filters)
    if char_filters is not None:
        children["charFilters"] = MemoryNode(children=char_filters)
    return _analyzers(MemoryNode(children=children))


@pytest.mark.unit
class TestDetectMode:
    """The marker decides the mode once; class beats name."""

    def test_class_marker(self):
        assert detect_mode(MemoryNode.of(**{"class": "a.b.EnglishAnalyzer"})) == BuiltinMode("a.b.EnglishAnalyzer")

    def test_name_marker(self):
        assert detect_mode(MemoryNode.of(name="Standard")) == BuiltinMode("Standard")

    def test_class_takes_precedence_over_name(self):
        node = MemoryNode.of(name="Standard", **{"class": "org.apache.lucene.analysis.en.EnglishAnalyzer"})

        assert detect_mode(node) == BuiltinMode("org.apache.lucene.analysis.en.EnglishAnalyzer")

    def test_no_marker_is_composed(self):
        assert detect_mode(MemoryNode()) == ComposedMode()

    def test_array_marker_is_not_a_marker(self):
        node = MemoryNode([PropertyEntry("class", PropertyType.ARRAY, ["x"])])

        assert detect_mode(node) == ComposedMode()


@pytest.mark.unit
class TestAbsentDefinition:
    """Missing definitions are a normal 'nothing to build' outcome."""

    def test_none_root_yields_none(self):
        assert AnalyzerCompiler().compile(None, "oak_analyzer") is None

    def test_root_without_default_yields_none(self):
        root = MemoryNode(children={"other": MemoryNode.of(name="Standard")})

        assert AnalyzerCompiler().compile(root, "oak_analyzer") is None

    def test_module_level_helper(self):
        assert build_custom_analyzers(MemoryNode(), "oak_analyzer") is None


@pytest.mark.unit
class TestBuiltinAnalyzer:
    """Built-in definitions produce a single typed analyzer entry."""

    def test_class_marker_with_parameters(self):
        default = MemoryNode.of(
            **{
                "class": "org.apache.lucene.analysis.en.EnglishAnalyzer",
                "jcr:primaryType": "nt:unstructured",
                "max_token_length": "100",
            }
        )

        registry = AnalyzerCompiler().compile(_analyzers(default), "oak_analyzer")

        assert registry.is_builtin
        assert registry.analyzer == BuiltinAnalyzer("english", {"max_token_length": "100", "type": "english"})
        assert registry.to_dict() == {"analyzer": {"oak_analyzer": {"max_token_length": "100", "type": "english"}}}

    def test_name_marker(self):
        registry = AnalyzerCompiler().compile(_analyzers(MemoryNode.of(name="Standard")), "a")

        assert registry.to_dict() == {"analyzer": {"a": {"type": "standard"}}}

    def test_reserved_names_never_leak(self):
        default = MemoryNode.of(name="Standard", **{"class": "x.WhitespaceAnalyzer", "jcr:primaryType": "nt:base"})

        args = AnalyzerCompiler().compile(_analyzers(default), "a").analyzer.args

        assert set(args) == {"type"}
        assert args["type"] == "whitespace"

    def test_type_always_comes_from_marker(self):
        default = MemoryNode.of(name="Standard", type="bogus")

        assert AnalyzerCompiler().compile(_analyzers(default), "a").analyzer.args["type"] == "standard"

    def test_property_dereferences_content_children(self, make_content):
        default = MemoryNode.of(
            {"stop1.txt": make_content("the\nan\n"), "stop2.txt": make_content("of")},
            name="Standard",
            stopwords="stop1.txt,stop2.txt",
        )

        args = AnalyzerCompiler().compile(_analyzers(default), "a").analyzer.args

        assert args == {"stopwords": ["the", "an", "of"], "type": "standard"}

    def test_referenced_child_is_not_loaded_again(self, make_content):
        default = MemoryNode.of({"stop1.txt": make_content("the")}, name="Standard", stopwords="stop1.txt")

        args = AnalyzerCompiler().compile(_analyzers(default), "a").analyzer.args

        assert args == {"stopwords": ["the"], "type": "standard"}

    def test_children_normalizing_to_same_key_are_rejected(self, make_content):
        default = MemoryNode.of({"en.txt": make_content("the"), "de.txt": make_content("der")}, name="Standard")

        with pytest.raises(ConfigurationError, match="both map to argument 'txt'"):
            AnalyzerCompiler().compile(_analyzers(default), "a")

    def test_content_child_becomes_argument(self, make_content):
        default = MemoryNode.of({"stopwords": make_content("a\nb")}, name="Standard")

        args = AnalyzerCompiler().compile(_analyzers(default), "a").analyzer.args

        assert args == {"stopwords": ["a", "b"], "type": "standard"}

    def test_property_wins_over_content_child(self, make_content):
        default = MemoryNode.of({"stopwords": make_content("a\nb")}, name="Standard", stopwords="_english_")

        args = AnalyzerCompiler().compile(_analyzers(default), "a").analyzer.args

        assert args["stopwords"] == "_english_"

    def test_filter_children_are_never_inspected(self):
        default = MemoryNode.of(
            {
                "tokenizer": MemoryNode(),
                "filters": MemoryNode(children={"NoSuchFilter": MemoryNode()}),
                "charFilters": MemoryNode(children={"Unknown": MemoryNode()}),
            },
            name="Standard",
        )

        registry = AnalyzerCompiler().compile(_analyzers(default), "a")

        assert isinstance(registry.analyzer, BuiltinAnalyzer)
        assert registry.tokenizers == ()
        assert registry.filters == ()
        assert registry.char_filters == ()

    def test_marker_normalizing_to_nothing_is_rejected(self):
        default = MemoryNode.of(**{"class": "org.example.Analyzer"})

        with pytest.raises(ConfigurationError, match="does not name an analyzer"):
            AnalyzerCompiler().compile(_analyzers(default), "a")


@pytest.mark.unit
class TestComposedAnalyzer:
    """Composed definitions emit tokenizer, filters and char filters."""

    def test_full_pipeline(self, composed_root):
        registry = AnalyzerCompiler().compile(composed_root, "oak_analyzer")

        assert registry.to_dict() == {
            "analyzer": {
                "oak_analyzer": {
                    "type": "custom",
                    "tokenizer": "custom_tokenizer",
                    "filter": ["lowercase_0", "stop_1", "porterstem_2"],
                    "char_filter": ["htmlstrip_0", "mapping_1"],
                }
            },
            "tokenizer": {"custom_tokenizer": {"maxTokenLength": "255", "type": "standard"}},
            "filter": {
                "lowercase_0": {"type": "lowercase"},
                "stop_1": {"stopwords": ["a", "the", "of"], "ignoreCase": "true", "type": "stop"},
                "porterstem_2": {"type": "porterstem"},
            },
            "char_filter": {
                "htmlstrip_0": {"type": "htmlstrip"},
                "mapping_1": {"mapping": "x", "type": "mapping"},
            },
        }

    def test_filter_order_follows_declaration(self):
        root = _composed(
            filters={"Trim": MemoryNode(), "ASCIIFolding": MemoryNode(), "LowerCase": MemoryNode()},
        )

        analyzer = AnalyzerCompiler().compile(root, "a").analyzer

        assert isinstance(analyzer, ComposedAnalyzer)
        assert analyzer.filter_ids == ("trim_0", "asciifolding_1", "lowercase_2")

    def test_same_filter_twice_gets_distinct_ids(self):
        root = _composed(filters={"LowerCase": MemoryNode(), "lowercase": MemoryNode()})

        assert AnalyzerCompiler().compile(root, "a").analyzer.filter_ids == ("lowercase_0", "lowercase_1")

    def test_char_filter_ordinals_are_independent(self):
        root = _composed(
            filters={"LowerCase": MemoryNode(), "Stop": MemoryNode()},
            char_filters={"PatternReplace": MemoryNode.of(pattern="a", replacement="b")},
        )

        registry = AnalyzerCompiler().compile(root, "a")

        assert registry.analyzer.char_filter_ids == ("patternreplace_0",)
        assert registry.char_filters[0].kind is ComponentKind.CHAR_FILTER
        assert registry.filters[1].ordinal == 1
        assert registry.filters[1].kind is ComponentKind.TOKEN_FILTER

    def test_missing_filter_slots_yield_empty_lists(self):
        registry = AnalyzerCompiler().compile(_composed(), "a")

        assert registry.analyzer.filter_ids == ()
        assert registry.analyzer.char_filter_ids == ()
        assert registry.to_dict()["analyzer"]["a"]["filter"] == []
        assert "filter" not in registry.to_dict()

    def test_tokenizer_reserved_name_not_in_args(self):
        root = _composed(name="org.apache.lucene.analysis.core.WhitespaceTokenizer", **{"jcr:primaryType": "nt:x"})

        tokenizer = AnalyzerCompiler().compile(root, "a").tokenizers[0]

        assert tokenizer.name == "whitespacetokenizer"
        assert tokenizer.args == {"type": "whitespacetokenizer"}

    def test_tokenizer_id_comes_from_settings(self):
        settings = CompilerSettings(tokenizer_id="oak_tokenizer")

        registry = AnalyzerCompiler(settings).compile(_composed(), "a")

        assert registry.analyzer.tokenizer_id == "oak_tokenizer"
        assert list(registry.to_dict()["tokenizer"]) == ["oak_tokenizer"]

    def test_blank_content_lines_follow_settings(self, make_content):
        stop = MemoryNode.of({"s.txt": make_content("a\n\nb\n")}, words="s.txt")
        root = _composed(filters={"Stop": stop})

        kept = AnalyzerCompiler().compile(root, "a").filters[0].args["stopwords"]
        dropped = (
            AnalyzerCompiler(CompilerSettings(keep_blank_content_lines=False)).compile(root, "a").filters[0].args["stopwords"]
        )

        assert kept == ["a", "", "b"]
        assert dropped == ["a", "b"]

    def test_compilations_share_no_state(self, composed_root):
        compiler = AnalyzerCompiler()

        first = compiler.compile(composed_root, "a")
        first.filters[1].args["stopwords"].append("mutated")
        second = compiler.compile(composed_root, "a")

        assert second.filters[1].args["stopwords"] == ["a", "the", "of"]


@pytest.mark.unit
class TestComposedFailures:
    """Failures abort the whole compilation."""

    def test_missing_tokenizer_is_configuration_error(self):
        root = _analyzers(MemoryNode(children={"filters": MemoryNode(children={"LowerCase": MemoryNode()})}))

        with pytest.raises(ConfigurationError, match="tokenizer"):
            AnalyzerCompiler().compile(root, "a")

    def test_unknown_filter_is_configuration_error(self):
        root = _composed(filters={"NoSuchFilter": MemoryNode()})

        with pytest.raises(ConfigurationError, match="nosuchfilter"):
            AnalyzerCompiler().compile(root, "a")

    def test_token_filter_name_unknown_as_char_filter(self):
        root = _composed(char_filters={"LowerCase": MemoryNode()})

        with pytest.raises(ConfigurationError):
            AnalyzerCompiler().compile(root, "a")

    def test_content_failure_aborts(self, tmp_path):
        broken = MemoryNode([PropertyEntry("jcr:data", PropertyType.BINARY, FileBlob(tmp_path / "gone.txt"))])
        stop = MemoryNode.of({"gone.txt": broken}, words="gone.txt")
        root = _composed(filters={"LowerCase": MemoryNode(), "Stop": stop})

        with pytest.raises(ContentLoadError) as excinfo:
            AnalyzerCompiler().compile(root, "a")

        assert excinfo.value.node_name == "gone.txt"


@pytest.mark.unit
class TestCompileTracing:
    """Each compilation runs inside an analyzer.compile span."""

    @pytest.fixture
    def spans(self, monkeypatch):
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import SimpleSpanProcessor
        from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

        from analyzer_compiler.observability import tracing as tracing_module

        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("test"))
        return exporter

    def test_span_records_mode(self, spans, composed_root):
        AnalyzerCompiler().compile(composed_root, "oak_analyzer")

        (span,) = spans.get_finished_spans()
        assert span.name == "analyzer.compile"
        assert span.attributes["analyzer.name"] == "oak_analyzer"
        assert span.attributes["analyzer.mode"] == "composed"

    def test_span_marks_failure(self, spans):
        from opentelemetry.trace import StatusCode

        with pytest.raises(ConfigurationError):
            AnalyzerCompiler().compile(_composed(filters={"Bogus": MemoryNode()}), "a")

        (span,) = spans.get_finished_spans()
        assert span.status.status_code is StatusCode.ERROR

    def test_logs_carry_analyzer_name(self, composed_root):
        records = []
        handler = logging.Handler(logging.DEBUG)
        handler.emit = lambda record: records.append(json.loads(JsonFormatter().format(record)))
        compiler_logger = logging.getLogger(compiler_module.__name__)
        compiler_logger.addHandler(handler)
        level = compiler_logger.level
        compiler_logger.setLevel(logging.DEBUG)
        try:
            AnalyzerCompiler().compile(composed_root, "oak_analyzer")
        finally:
            compiler_logger.removeHandler(handler)
            compiler_logger.setLevel(level)

        assert records
        assert all(record["analyzer"] == "oak_analyzer" for record in records)
        assert "analyzer" not in get_trace_context()

    def test_absent_definition_opens_no_span(self, spans):
        AnalyzerCompiler().compile(MemoryNode(), "a")

        assert spans.get_finished_spans() == ()


@pytest.mark.unit
def test_compiler_logs_absent_definition(caplog):
    with caplog.at_level("INFO", logger=compiler_module.__name__):
        AnalyzerCompiler().compile(MemoryNode(), "oak_analyzer")

    assert "No default analyzer configured for oak_analyzer" in caplog.text
