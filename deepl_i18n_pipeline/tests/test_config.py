import pytest

from deepl_i18n.config import PipelineConfig, TranslateConfig, build_config, load_config_file


def test_defaults():
    cfg = PipelineConfig()
    assert cfg.max_request_size_bytes == 131072
    assert cfg.estimated_overhead_bytes == 2048
    assert cfg.max_retries == 5
    assert cfg.base_delay_ms == 1000
    assert cfg.keep_tags is None
    assert PipelineConfig(start_tag="<a>", end_tag="</a>").keep_tags == ("<a>", "</a>")


def test_yaml_file_and_overrides(tmp_path):
    path = tmp_path / "deepl-i18n.yaml"
    path.write_text(
        "input_path: locales/en.json\n"
        "output_pattern: locales/{language}.json\n"
        "languages: [de, fr]\n"
        "max_retries: 2\n"
        "start_tag: '<!-- keep -->'\n"
        "end_tag: '<!-- /keep -->'\n",
        encoding="utf-8",
    )
    values = load_config_file(str(path))

    cfg = build_config(values, {"languages": ["ja"], "base_delay_ms": 10, "dry_run": None})

    assert isinstance(cfg, TranslateConfig)
    assert cfg.input_path == "locales/en.json"
    assert cfg.languages == ["ja"]
    assert cfg.pipeline.max_retries == 2
    assert cfg.pipeline.base_delay_ms == 10
    assert cfg.pipeline.keep_tags == ("<!-- keep -->", "<!-- /keep -->")
    assert cfg.dry_run is False


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("languages: [de]\ncache_path: x.sqlite\n", encoding="utf-8")
    with pytest.raises(ValueError, match="cache_path"):
        load_config_file(str(path))


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- de\n- fr\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_file(str(path))


def test_required_settings():
    with pytest.raises(ValueError, match="languages"):
        build_config({}, {"input_path": "a.json", "output_pattern": "{language}.json"})


def test_overhead_must_leave_room():
    with pytest.raises(ValueError):
        build_config({}, {
            "input_path": "a.json",
            "output_pattern": "{language}.json",
            "languages": ["de"],
            "max_request_size_bytes": 100,
            "estimated_overhead_bytes": 100,
        })


def test_scalar_language_becomes_a_list(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("input_path: a.json\noutput_pattern: '{language}.json'\nlanguages: de\nhtml_like_extensions: .md\n", encoding="utf-8")
    cfg = build_config(load_config_file(str(path)), {})
    assert cfg.languages == ["de"]
    assert cfg.html_like_extensions == [".md"]


@pytest.mark.parametrize("languages", [42, {"de": True}, ["de", 7]])
def test_languages_must_be_strings(languages):
    with pytest.raises(ValueError, match="languages"):
        build_config({}, {"input_path": "a.json", "output_pattern": "{language}.json", "languages": languages})
