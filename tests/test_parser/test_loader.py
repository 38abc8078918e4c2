"""Tests for specdoc.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from specdoc.exceptions import SpecParseError
from specdoc.models import Dialect
from specdoc.parser.loader import decode_document, detect_dialect, is_remote, load_spec

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_spec dispatch
# ---------------------------------------------------------------------------


class TestLoadSpec:
    """load_spec reads files, URLs and stdin."""

    def test_loads_json_file(self) -> None:
        result = load_spec(str(FIXTURES_DIR / "petstore_swagger2.json"))
        assert result["swagger"] == "2.0"
        assert result["info"]["title"] == "Swagger Petstore"

    def test_loads_yaml_file(self) -> None:
        result = load_spec(str(FIXTURES_DIR / "minimal_pets.yaml"))
        assert result["info"]["title"] == "Minimal Pets"
        assert result["paths"]["/pets"]["get"]["responses"]["200"]["schema"] == {
            "$ref": "#/definitions/Pet"
        }

    def test_loads_yaml_without_extension(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "api"
        spec_file.write_text(
            textwrap.dedent("""\
                openapi: "3.0.3"
                info:
                  title: No Extension
                  version: "1.0"
                paths: {}
            """),
            encoding="utf-8",
        )
        assert load_spec(str(spec_file))["info"]["title"] == "No Extension"

    def test_loads_from_stdin(self) -> None:
        spec_json = json.dumps({"swagger": "2.0", "info": {"title": "stdin", "version": "1"}})
        with patch("specdoc.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(spec_json)
            result = load_spec("-")
        assert result["info"]["title"] == "stdin"

    def test_empty_stdin_raises(self) -> None:
        with patch("specdoc.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("   \n")
            with pytest.raises(SpecParseError, match="No input"):
                load_spec("-")

    def test_loads_from_url(self) -> None:
        spec = {"openapi": "3.0.3", "info": {"title": "Remote", "version": "1.0"}}
        response = httpx.Response(
            status_code=200,
            json=spec,
            request=httpx.Request("GET", "https://example.com/api.json"),
        )
        with patch("specdoc.parser.loader.httpx.get", return_value=response) as mock_get:
            result = load_spec("https://example.com/api.json")
        assert result["info"]["title"] == "Remote"
        assert mock_get.call_args.kwargs["follow_redirects"] is True

    def test_url_http_error_raises(self) -> None:
        response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("specdoc.parser.loader.httpx.get", return_value=response):
            with pytest.raises(SpecParseError, match="HTTP 404"):
                load_spec("https://example.com/missing.json")

    def test_url_connection_error_raises(self) -> None:
        with patch(
            "specdoc.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(SpecParseError, match="Failed to fetch"):
                load_spec("https://example.com/api.json")

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SpecParseError, match="not found"):
            load_spec(str(tmp_path / "nope.json"))

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "empty.json"
        spec_file.write_text("", encoding="utf-8")
        with pytest.raises(SpecParseError, match="empty"):
            load_spec(str(spec_file))


class TestIsRemote:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("https://example.com/api.json", True),
            ("http://localhost:8080/v2/swagger.json", True),
            ("./api.json", False),
            ("/abs/path/api.yaml", False),
            ("-", False),
        ],
    )
    def test_detection(self, source: str, expected: bool) -> None:
        assert is_remote(source) is expected


# ---------------------------------------------------------------------------
# decode_document
# ---------------------------------------------------------------------------


class TestDecodeDocument:
    def test_json_first(self) -> None:
        assert decode_document('{"a": 1}') == {"a": 1}

    def test_yaml_fallback(self) -> None:
        assert decode_document("a: 1\nb: [x, y]\n") == {"a": 1, "b": ["x", "y"]}

    def test_json_hint_rejects_yaml(self) -> None:
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            decode_document("a: 1\n", hint="json")

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            decode_document("[1, 2, 3]")

    def test_garbage_reports_both_errors(self) -> None:
        with pytest.raises(SpecParseError) as exc_info:
            decode_document("{unclosed: [")
        message = str(exc_info.value)
        assert "JSON error" in message
        assert "YAML error" in message


# ---------------------------------------------------------------------------
# detect_dialect
# ---------------------------------------------------------------------------


class TestDetectDialect:
    def test_swagger2(self) -> None:
        assert detect_dialect({"swagger": "2.0"}) is Dialect.SWAGGER2

    @pytest.mark.parametrize("version", ["3.0.0", "3.0.3", "3.1.0"])
    def test_openapi3(self, version: str) -> None:
        assert detect_dialect({"openapi": version}) is Dialect.OPENAPI3

    def test_swagger_1_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="Unsupported Swagger version"):
            detect_dialect({"swagger": "1.2"})

    def test_openapi_4_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="Unsupported OpenAPI version"):
            detect_dialect({"openapi": "4.0.0"})

    def test_missing_version_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="Missing 'swagger' or 'openapi'"):
            detect_dialect({"info": {"title": "x"}})
