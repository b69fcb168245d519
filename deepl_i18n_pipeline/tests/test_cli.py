import json
import sys

import pytest

from deepl_i18n import cli
from deepl_i18n.config import TranslateConfig
from deepl_i18n.errors import ParseError

from fakes import PerLanguageTranslator, UpperTranslator


def test_build_output_file_name():
    assert cli.build_output_file_name("es", "output_{language}.json") == "output_es.json"
    assert cli.build_output_file_name("es", "output_{language}_{language}.json") == "output_es_es.json"


def test_input_mode():
    cfg = TranslateConfig(input_path="docs/README.md", output_pattern="{language}.md", languages=["de"])
    assert cli.input_mode(cfg) == "document"
    cfg.input_path = "en.JSON"
    assert cli.input_mode(cfg) == "json"
    cfg.input_path = "en.yaml"
    with pytest.raises(ParseError):
        cli.input_mode(cfg)


def test_parse_json_document():
    assert cli.parse_json_document('{"a": "b"}') == {"a": "b"}
    with pytest.raises(ParseError):
        cli.parse_json_document("{not json")


@pytest.mark.asyncio
async def test_run_json_writes_one_file_per_language(tmp_path):
    src = tmp_path / "en.json"
    src.write_text(json.dumps({"welcome": "Welcome, {{name}}!", "nav": {"home": "Home"}}), encoding="utf-8")
    cfg = TranslateConfig(
        input_path=str(src),
        output_pattern=str(tmp_path / "locales" / "{language}" / "common.json"),
        languages=["de", "fr"],
        report_path=str(tmp_path / "report.json"),
    )

    outcomes = await cli.run(cfg, translator=UpperTranslator())

    assert all(o.ok for o in outcomes.values())
    de = json.loads((tmp_path / "locales" / "de" / "common.json").read_text(encoding="utf-8"))
    assert de == {"welcome": "de:WELCOME, {{name}}!", "nav": {"home": "de:HOME"}}
    report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert report["mode"] == "json"
    assert report["succeeded"] == 2
    assert report["languages"]["fr"]["status"] == "ok"


@pytest.mark.asyncio
async def test_run_document_writes_temp_file_and_skips_failed_language(tmp_path):
    src = tmp_path / "index.html"
    src.write_text("<p>Hi</p><!-- keep --><b>Brand</b><!-- /keep -->", encoding="utf-8")
    cfg = TranslateConfig(
        input_path=str(src),
        output_pattern=str(tmp_path / "out" / "index.{language}.html"),
        languages=["de", "fr"],
        temp_file_path=str(tmp_path / "to_translate.txt"),
    )
    cfg.pipeline.start_tag = "<!-- keep -->"
    cfg.pipeline.end_tag = "<!-- /keep -->"

    outcomes = await cli.run(cfg, translator=PerLanguageTranslator({"fr": "none"}))

    assert (tmp_path / "to_translate.txt").read_text(encoding="utf-8") == "<p>Hi</p><keep><b>Brand</b></keep>"
    assert (tmp_path / "out" / "index.de.html").read_text(encoding="utf-8") == "de:<p>Hi</p><b>Brand</b>"
    assert not (tmp_path / "out" / "index.fr.html").exists()
    assert outcomes["fr"].status == "skipped"


def test_main_dry_run(tmp_path):
    src = tmp_path / "en.json"
    src.write_text('\ufeff{"title": "Hello {name}", "n": 1}', encoding="utf-8")
    pattern = str(tmp_path / "{language}.json")

    code = cli.main(["translate", "--input", str(src), "--output-pattern", pattern, "--languages", "de", "--dry-run"])

    assert code == cli.EXIT_OK
    assert json.loads((tmp_path / "de.json").read_text(encoding="utf-8")) == {"title": "Hello {name}"}


def test_main_bad_json(tmp_path):
    src = tmp_path / "en.json"
    src.write_text("{oops", encoding="utf-8")
    code = cli.main(["translate", "--input", str(src), "--output-pattern", "x_{language}.json", "--languages", "de", "--dry-run"])
    assert code == cli.EXIT_USAGE


def test_main_missing_settings():
    assert cli.main(["translate", "--input", "en.json"]) == cli.EXIT_USAGE


def test_main_missing_api_key(tmp_path, monkeypatch):
    monkeypatch.delenv("DEEPL_API_KEY", raising=False)
    src = tmp_path / "en.json"
    src.write_text('{"a": "b"}', encoding="utf-8")
    code = cli.main(["translate", "--input", str(src), "--output-pattern", str(tmp_path / "{language}.json"), "--languages", "de"])
    assert code == cli.EXIT_PARTIAL


def _nested_json(depth: int) -> str:
    return '{"a": ' * depth + '"leaf"' + "}" * depth


def test_main_deeply_nested_json(tmp_path):
    src = tmp_path / "en.json"
    src.write_text(_nested_json(1000), encoding="utf-8")
    limit = sys.getrecursionlimit()

    code = cli.main(["translate", "--input", str(src), "--output-pattern", str(tmp_path / "{language}.json"),
                     "--languages", "de", "--dry-run"])

    assert code == cli.EXIT_OK
    out = cli.parse_json_document((tmp_path / "de.json").read_text(encoding="utf-8"))
    depth = 0
    while isinstance(out, dict):
        out = out["a"]
        depth += 1
    assert (depth, out) == (1000, "leaf")
    assert sys.getrecursionlimit() == limit


def test_parse_json_document_too_deep(monkeypatch):
    def boom(text):
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr(cli.json, "loads", boom)
    with pytest.raises(ParseError, match="nested too deeply"):
        cli.parse_json_document('{"a": "b"}')


def test_load_text_rejects_invalid_utf8(tmp_path):
    src = tmp_path / "en.json"
    src.write_bytes(b'{"a": "\xff\xfe bad"}')
    with pytest.raises(ParseError, match="UTF-8"):
        cli.load_text(str(src))


def test_main_invalid_utf8(tmp_path):
    src = tmp_path / "en.json"
    src.write_bytes(b'{"a": "\xff\xfe bad"}')
    code = cli.main(["translate", "--input", str(src), "--output-pattern", str(tmp_path / "{language}.json"),
                     "--languages", "de", "--dry-run"])
    assert code == cli.EXIT_USAGE
    assert not (tmp_path / "de.json").exists()
