from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import yaml

@dataclass
class PipelineConfig:
    max_request_size_bytes: int = 128 * 1024
    # room left for the JSON envelope / options of one request
    estimated_overhead_bytes: int = 2048
    max_retries: int = 5
    base_delay_ms: int = 1000
    # optional do-not-translate tags for html-like documents, e.g. <!-- keep --> / <!-- /keep -->
    start_tag: Optional[str] = None
    end_tag: Optional[str] = None

    @property
    def max_text_size_bytes(self) -> int:
        return self.max_request_size_bytes - self.estimated_overhead_bytes

    @property
    def keep_tags(self) -> Optional[tuple]:
        if self.start_tag and self.end_tag:
            return self.start_tag, self.end_tag
        return None

@dataclass
class TranslateConfig:
    input_path: str
    output_pattern: str
    languages: List[str]

    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    html_like_extensions: List[str] = field(default_factory=lambda: [".html", ".xml", ".md", ".txt"])
    temp_file_path: Optional[str] = None
    api_url: Optional[str] = None
    request_timeout: int = 90
    report_path: Optional[str] = None
    log_level: str = "INFO"
    dry_run: bool = False

PIPELINE_KEYS = {f.name for f in fields(PipelineConfig)}
TRANSLATE_KEYS = {f.name for f in fields(TranslateConfig)} - {"pipeline"}
LIST_KEYS = ("languages", "html_like_extensions")

def as_str_list(name: str, value: Any) -> List[str]:
    # a YAML scalar like `languages: de` means a one-item list
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{name} must be a string or a list of strings, got {value!r}")
    return list(value)

def load_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    unknown = set(data) - PIPELINE_KEYS - TRANSLATE_KEYS
    if unknown:
        raise ValueError(f"Unknown config key(s) in {path}: {', '.join(sorted(unknown))}")
    return data

def build_config(file_values: Dict[str, Any], overrides: Dict[str, Any]) -> TranslateConfig:
    """Merge config-file values with CLI overrides (None means 'not given')."""
    merged = dict(file_values)
    merged.update({k: v for k, v in overrides.items() if v is not None})

    missing = [k for k in ("input_path", "output_pattern", "languages") if not merged.get(k)]
    if missing:
        raise ValueError(f"Missing required setting(s): {', '.join(missing)}")
    for k in LIST_KEYS:
        if k in merged:
            merged[k] = as_str_list(k, merged[k])

    pipeline = PipelineConfig(**{k: merged[k] for k in PIPELINE_KEYS if k in merged})
    if pipeline.max_text_size_bytes <= 0:
        raise ValueError("max_request_size_bytes must be larger than estimated_overhead_bytes")
    return TranslateConfig(pipeline=pipeline, **{k: merged[k] for k in TRANSLATE_KEYS if k in merged})
