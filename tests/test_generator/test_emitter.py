"""Tests for vantagegen.generator.emitter.

Covers:
- Module structure (interfaces, implementations, composite client, __all__)
- The request URL each generated operation builds, by executing the module
  against a MockClient
- Placeholder / argument agreement and public inputs for every operation
- Documented defaults, keyword-safe argument names and literal escaping
- plain vs result variants
- Determinism and name-collision checks
- write_module to a file and to stdout
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from vantagegen.client import MockClient, RequestClient, RequestFailure
from vantagegen.exceptions import ConnectionError_, GenerationError
from vantagegen.generator.emitter import (
    build_operation,
    py_docstring,
    py_string,
    render_module,
    url_template,
    write_module,
)
from vantagegen.models import (
    ApiDocument,
    ClientVariant,
    Function,
    GeneratorConfig,
    Optional_,
    Parameter,
    Required,
    Section,
)
from vantagegen.output import OutputManager, set_output


BASE = "https://www.alphavantage.co/query"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _req(name: str) -> Parameter:
    return Parameter(name=name, necessity=Required())


def _opt(name: str, default: str) -> Parameter:
    return Parameter(name=name, necessity=Optional_(default=default))


def _function(name: str, *parameters: Parameter, raw: str | None = None, description: str = "") -> Function:
    return Function(
        canonical_name=name,
        raw_endpoint_name=raw or name.upper(),
        description=description,
        parameters=list(parameters),
    )


def _config(**overrides: Any) -> GeneratorConfig:
    return GeneratorConfig(**{"document": "documentation.html", **overrides})


def _quotes_and_info() -> ApiDocument:
    """One section, one function: the canonical end-to-end example."""
    return ApiDocument(
        sections=[
            Section(
                identifier="QuotesAndInfo",
                title="Quotes & Info",
                functions=[
                    _function(
                        "current_price",
                        _req("symbol"),
                        _opt("interval", "1min"),
                        _req("apikey"),
                        _req("function"),
                        raw="Current Price",
                        description="Returns the price.",
                    )
                ],
            )
        ]
    )


def _load(source: str) -> dict[str, Any]:
    """Execute generated source and return its namespace."""
    namespace: dict[str, Any] = {}
    exec(compile(source, "<generated>", "exec"), namespace)
    return namespace


def _classes(tree: ast.Module) -> dict[str, ast.ClassDef]:
    return {node.name: node for node in tree.body if isinstance(node, ast.ClassDef)}


def _methods(cls: ast.ClassDef) -> dict[str, ast.FunctionDef]:
    return {node.name: node for node in cls.body if isinstance(node, ast.FunctionDef)}


def _format_call(method: ast.FunctionDef) -> ast.Call:
    for node in ast.walk(method):
        if (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Attribute)
            and node.func.attr == "format"
        ):
            return node
    raise AssertionError(f"{method.name} builds no URL")


class FailingClient(RequestClient):
    def fetch(self, url: str) -> dict[str, Any]:
        raise ConnectionError_("connection refused")


# ---------------------------------------------------------------------------
# End-to-end example
# ---------------------------------------------------------------------------


class TestQuotesAndInfo:
    """A "Quotes & Info" section with a "Current Price" endpoint."""

    def test_interface_declares_operation(self) -> None:
        tree = ast.parse(render_module(_quotes_and_info(), _config()))
        interface = _classes(tree)["QuotesAndInfo"]

        assert [ast.unparse(b) for b in interface.bases] == ["ABC"]
        method = _methods(interface)["current_price"]
        assert [a.arg for a in method.args.args] == ["self", "symbol", "interval"]
        assert [ast.unparse(d) for d in method.decorator_list] == ["abstractmethod"]
        assert ast.get_docstring(method) == "Returns the price."

    def test_implementation_builds_url(self) -> None:
        tree = ast.parse(render_module(_quotes_and_info(), _config()))
        impl = _classes(tree)["QuotesAndInfoImpl"]

        assert [ast.unparse(b) for b in impl.bases] == ["QuotesAndInfo", "Generic[ClientT]"]
        call = _format_call(_methods(impl)["current_price"])
        assert call.func.value.value == f"{BASE}?symbol={{}}&interval={{}}&apikey={{}}&function={{}}"
        assert [ast.unparse(a) for a in call.args] == [
            "symbol",
            "interval",
            "self.apikey",
            "'Current Price'",
        ]

    def test_executed_module_requests_url(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config()))
        api = namespace["AlphaVantageClient"]("demo", MockClient())

        assert api.current_price("IBM", "5min") == {}
        assert api.client.requests == [
            f"{BASE}?symbol=IBM&interval=5min&apikey=demo&function=Current Price"
        ]

    def test_documented_default_applies(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config()))
        api = namespace["AlphaVantageClient"]("demo", MockClient())

        api.current_price("IBM")
        assert api.client.last_url.endswith("?symbol=IBM&interval=1min&apikey=demo&function=Current Price")

    def test_composite_client_is_an_implementation(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config()))
        composite = namespace["AlphaVantageClient"]
        assert issubclass(composite, namespace["QuotesAndInfoImpl"])
        assert issubclass(composite, namespace["QuotesAndInfo"])

    def test_interface_is_abstract(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config()))
        with pytest.raises(TypeError):
            namespace["QuotesAndInfo"]()

    def test_all_exports(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config()))
        assert namespace["__all__"] == ["AlphaVantageClient", "QuotesAndInfo", "QuotesAndInfoImpl"]


# ---------------------------------------------------------------------------
# Sample documentation page
# ---------------------------------------------------------------------------


class TestSampleDocument:
    def test_module_parses(self, api_document: ApiDocument) -> None:
        tree = ast.parse(render_module(api_document, _config()))
        assert set(_classes(tree)) == {
            "TimeSeries",
            "TimeSeriesImpl",
            "QuotesAndInfo",
            "QuotesAndInfoImpl",
            "ForeignExchangeRates",
            "ForeignExchangeRatesImpl",
            "TechnicalIndicators",
            "TechnicalIndicatorsImpl",
            "AlphaVantageClient",
        }

    def test_placeholders_match_arguments(self, api_document: ApiDocument) -> None:
        tree = ast.parse(render_module(api_document, _config()))
        for name, cls in _classes(tree).items():
            if not name.endswith("Impl"):
                continue
            for method in _methods(cls).values():
                call = _format_call(method)
                assert call.func.value.value.count("{}") == len(call.args), method.name

    def test_public_inputs_exclude_synthesized_and_format(
        self, api_document: ApiDocument
    ) -> None:
        tree = ast.parse(render_module(api_document, _config()))
        classes = _classes(tree)
        for section in api_document.sections:
            methods = _methods(classes[section.identifier])
            for function in section.functions:
                inputs = [a.arg for a in methods[function.canonical_name].args.args[1:]]
                expected = [
                    p.name
                    for p in function.parameters
                    if p.name not in {"apikey", "function", "datatype"}
                ]
                assert inputs == expected

    def test_lookup_table_endpoints(self, api_document: ApiDocument) -> None:
        namespace = _load(render_module(api_document, _config()))
        api = namespace["AlphaVantageClient"]("demo", MockClient())

        api.quote_endpoint("IBM")
        api.search_endpoint("microsoft")
        assert api.client.requests == [
            f"{BASE}?function=GLOBAL_QUOTE&symbol=IBM&apikey=demo",
            f"{BASE}?function=SYMBOL_SEARCH&keywords=microsoft&apikey=demo",
        ]

    def test_empty_section_still_gets_classes(self, api_document: ApiDocument) -> None:
        namespace = _load(render_module(api_document, _config()))
        assert issubclass(namespace["AlphaVantageClient"], namespace["TechnicalIndicatorsImpl"])

    def test_deterministic(self, api_document: ApiDocument) -> None:
        config = _config()
        assert render_module(api_document, config) == render_module(api_document, config)

    def test_no_timestamps_or_paths(self, api_document: ApiDocument) -> None:
        source = render_module(api_document, _config(document="/tmp/secret/documentation.html"))
        assert "/tmp/secret" not in source
        assert "documentation.html" not in source

    def test_ends_with_newline(self, api_document: ApiDocument) -> None:
        assert render_module(api_document, _config()).endswith('"""\n')


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class TestOptions:
    def test_custom_client_class(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config(client_class="Vantage")))
        assert "Vantage" in namespace["__all__"]
        assert "AlphaVantageClient" not in namespace

    def test_custom_base_url(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config(base_url="http://localhost:9000/q")))
        api = namespace["AlphaVantageClient"]("k", MockClient())
        api.current_price("IBM")
        assert api.client.last_url.startswith("http://localhost:9000/q?symbol=IBM&")

    def test_no_defaults(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config(emit_defaults=False)))
        api = namespace["AlphaVantageClient"]("demo", MockClient())
        with pytest.raises(TypeError):
            api.current_price("IBM")

    def test_result_variant_returns_failure(self) -> None:
        source = render_module(_quotes_and_info(), _config(variant=ClientVariant.RESULT))
        assert "-> RequestResult" in source
        namespace = _load(source)
        api = namespace["AlphaVantageClient"]("demo", FailingClient())

        result = api.current_price("IBM")
        assert isinstance(result, RequestFailure)
        assert result.message == "connection refused"
        assert result.url.endswith("function=Current Price")

    def test_plain_variant_raises(self) -> None:
        source = render_module(_quotes_and_info(), _config(variant=ClientVariant.PLAIN))
        assert "-> JsonObject" in source
        api = _load(source)["AlphaVantageClient"]("demo", FailingClient())
        with pytest.raises(ConnectionError_):
            api.current_price("IBM")

    def test_from_apikey_uses_factory(self) -> None:
        namespace = _load(render_module(_quotes_and_info(), _config()))
        api = namespace["AlphaVantageClient"].from_apikey("demo", MockClient)
        assert isinstance(api.client, MockClient)
        assert api.apikey == "demo"


# ---------------------------------------------------------------------------
# build_operation
# ---------------------------------------------------------------------------


class TestBuildOperation:
    def test_defaults_only_for_trailing_optionals(self) -> None:
        function = _function(
            "f",
            _req("function"),
            _opt("interval", "5min"),
            _req("symbol"),
            _opt("outputsize", "compact"),
            _req("apikey"),
        )
        op = build_operation(function, BASE)
        assert op["signature"] == ', interval: str, symbol: str, outputsize: str = "compact"'

    def test_all_optional(self) -> None:
        function = _function("f", _req("function"), _opt("a", "1"), _opt("b", "2"), _req("apikey"))
        op = build_operation(function, BASE)
        assert op["signature"] == ', a: str = "1", b: str = "2"'

    def test_no_caller_parameters(self) -> None:
        op = build_operation(_function("market_status", _req("function"), _req("apikey")), BASE)
        assert op["signature"] == ""
        assert op["arguments"] == ['"MARKET_STATUS"', "self.apikey"]

    def test_keyword_parameter_names(self) -> None:
        function = _function("f", _req("function"), _req("from"), _req("apikey"))
        op = build_operation(function, BASE)
        assert op["signature"] == ", from_: str"
        assert op["arguments"] == ['"F"', "from_", "self.apikey"]
        assert op["url_template"] == f'"{BASE}?function={{}}&from={{}}&apikey={{}}"'

    def test_colliding_parameter_names(self) -> None:
        function = _function("f", _req("function"), _req("a-b"), _req("a_b"), _req("apikey"))
        op = build_operation(function, BASE)
        assert op["signature"] == ", a_b: str, a_b_2: str"
        assert op["arguments"][1:3] == ["a_b", "a_b_2"]

    def test_fetch_method(self) -> None:
        function = _function("f", _req("function"), _req("apikey"))
        assert build_operation(function, BASE)["fetch_method"] == "fetch"
        assert build_operation(function, BASE, fetch_method="fetch_result")["fetch_method"] == "fetch_result"

    def test_missing_description_means_no_docstring(self) -> None:
        op = build_operation(_function("f", _req("function"), _req("apikey")), BASE)
        assert op["docstring"] is None

    def test_description_whitespace_is_normalised(self) -> None:
        function = _function(
            "f", _req("function"), _req("apikey"), description="Line one.\n   Line   two."
        )
        assert build_operation(function, BASE)["docstring"] == '"""Line one. Line two."""'


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------


class TestLiterals:
    @pytest.mark.parametrize(
        "value",
        ["compact", "", 'say "hi"', "it's", "back\\slash", "tab\there", "{}", "Ünïcode"],
    )
    def test_py_string_round_trips(self, value: str) -> None:
        assert ast.literal_eval(py_string(value)) == value

    def test_py_string_prefers_double_quotes(self) -> None:
        assert py_string("compact") == '"compact"'

    @pytest.mark.parametrize(
        "text",
        [
            "Plain description.",
            'Contains """triple quotes""" inside.',
            "Ends with a quote \"",
            "Has a backslash \\d in it.",
            "A long description " * 10,
        ],
    )
    def test_py_docstring_round_trips(self, text: str) -> None:
        literal = py_docstring(text.strip())
        source = f"def f():\n        {literal}\n"
        docstring = ast.get_docstring(ast.parse(source).body[0])
        assert " ".join(docstring.split()) == " ".join(text.split())

    def test_py_docstring_wraps_long_text(self) -> None:
        rendered = " " * 8 + py_docstring("word " * 40)
        assert len(rendered.splitlines()) > 2
        assert all(len(line) <= 79 for line in rendered.splitlines())

    def test_py_docstring_never_splits_words(self) -> None:
        text = "self-describing " + "x" * 100
        literal = py_docstring(text)
        assert "self-describing" in literal
        assert "x" * 100 in literal

    def test_url_template_escapes_braces_in_base(self) -> None:
        template = url_template("https://example.com/{v}/query", ["function", "apikey"])
        assert template.format("F", "K") == "https://example.com/{v}/query?function=F&apikey=K"

    def test_hostile_description_still_renders(self) -> None:
        document = ApiDocument(
            sections=[
                Section(
                    identifier="Odd",
                    functions=[
                        _function(
                            "odd",
                            _req("function"),
                            _req("apikey"),
                            description='Ends in backslash \\ and """ quotes "',
                        )
                    ],
                )
            ]
        )
        tree = ast.parse(render_module(document, _config()))
        method = _methods(_classes(tree)["Odd"])["odd"]
        assert ast.get_docstring(method) == 'Ends in backslash \\ and """ quotes "'


# ---------------------------------------------------------------------------
# Name checks
# ---------------------------------------------------------------------------


class TestNameChecks:
    def test_duplicate_section_identifier_raises(self) -> None:
        document = ApiDocument(sections=[Section(identifier="Quotes"), Section(identifier="Quotes")])
        with pytest.raises(GenerationError, match="Duplicate section identifiers: Quotes"):
            render_module(document, _config())

    def test_duplicate_function_in_section_raises(self) -> None:
        function = _function("current_price", _req("function"), _req("apikey"))
        document = ApiDocument(
            sections=[Section(identifier="Quotes", functions=[function, function])]
        )
        with pytest.raises(GenerationError, match="current_price more than once"):
            render_module(document, _config())

    def test_function_in_two_sections_warns(self, capsys: pytest.CaptureFixture[str]) -> None:
        set_output(OutputManager(no_color=True))
        function = _function("current_price", _req("function"), _req("apikey"))
        document = ApiDocument(
            sections=[
                Section(identifier="Quotes", functions=[function]),
                Section(identifier="Prices", functions=[function]),
            ]
        )
        render_module(document, _config())
        assert "declared in both Quotes and Prices" in capsys.readouterr().err

    def test_invalid_python_raises_generation_error(self) -> None:
        with patch("vantagegen.generator.emitter.ast.parse", side_effect=SyntaxError("bad", ("x", 3, 1, ""))):
            with pytest.raises(GenerationError, match="not valid Python"):
                render_module(_quotes_and_info(), _config())


# ---------------------------------------------------------------------------
# write_module
# ---------------------------------------------------------------------------


class TestWriteModule:
    def test_writes_file(self, tmp_path: Path) -> None:
        target = tmp_path / "pkg" / "alphavantage_api.py"
        assert write_module("x = 1\n", str(target)) == target
        assert target.read_text(encoding="utf-8") == "x = 1\n"

    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "api.py"
        target.write_text("old\n", encoding="utf-8")
        write_module("new\n", str(target))
        assert target.read_text(encoding="utf-8") == "new\n"
        assert [p.name for p in tmp_path.iterdir()] == ["api.py"]

    def test_dash_writes_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert write_module("x = 1\n", "-") is None
        assert capsys.readouterr().out == "x = 1\n"

    def test_failed_write_keeps_old_contents(self, tmp_path: Path) -> None:
        target = tmp_path / "api.py"
        target.write_text("old\n", encoding="utf-8")
        with patch("vantagegen.generator.emitter.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(GenerationError, match="disk full"):
                write_module("new\n", str(target))
        assert target.read_text(encoding="utf-8") == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["api.py"]
