from __future__ import annotations
import argparse, asyncio, json, os, sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .logger import setup_logger
from .config import TranslateConfig, build_config, load_config_file
from .errors import FatalTranslationError, ParseError
from .pipeline import LanguageOutcome, mask_document, translate_document, translate_json
from .retry import RetryingTranslateClient
from .translator_base import IdentityTranslator, Translator
from .translator_deepl import DeepLTranslator

LANGUAGE_PLACEHOLDER = "{language}"

# json.loads/json.dumps recurse once per nesting level
JSON_RECURSION_LIMIT = 10000

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_USAGE = 2

# --------- small helpers ---------

def load_text(path: str) -> str:
    # utf-8-sig drops a leading BOM, which json.loads would choke on
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}") from e

def save_text(path: str, text: str) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)

def build_output_file_name(target_lang: str, output_pattern: str) -> str:
    return output_pattern.replace(LANGUAGE_PLACEHOLDER, target_lang)

@contextmanager
def json_recursion_headroom(limit: int = JSON_RECURSION_LIMIT) -> Iterator[None]:
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)

def parse_json_document(text: str) -> Any:
    try:
        with json_recursion_headroom():
            return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Error parsing JSON: {e}") from e
    except RecursionError as e:
        raise ParseError("Error parsing JSON: document is nested too deeply") from e

def dump_json_document(doc: Any) -> str:
    with json_recursion_headroom():
        return json.dumps(doc, ensure_ascii=False, indent=2) + "\n"
def input_mode(cfg: TranslateConfig) -> str:
    ext = os.path.splitext(cfg.input_path)[1].lower()
    if ext in {e.lower() for e in cfg.html_like_extensions}:
        return "document"
    if ext == ".json":
        return "json"
    raise ParseError(f"Don't know how to translate '{ext or cfg.input_path}' files")

def configure_translator(cfg: TranslateConfig, logger) -> Translator:
    if cfg.dry_run:
        logger.info("Dry run: texts are passed through untranslated.")
        return IdentityTranslator()
    return DeepLTranslator(api_url=cfg.api_url, timeout=cfg.request_timeout, logger=logger)

def configure_client(cfg: TranslateConfig, translator: Translator, logger) -> RetryingTranslateClient:
    return RetryingTranslateClient(
        translator,
        max_retries=cfg.pipeline.max_retries,
        base_delay_ms=cfg.pipeline.base_delay_ms,
        logger=logger,
    )

# ----------------- main pipeline -----------------

def write_outputs(cfg: TranslateConfig, mode: str, outcomes: Dict[str, LanguageOutcome], logger) -> None:
    for lang, outcome in outcomes.items():
        if not outcome.ok:
            continue
        out_path = build_output_file_name(lang, cfg.output_pattern)
        if mode == "json":
            save_text(out_path, dump_json_document(outcome.output))
        else:
            save_text(out_path, outcome.output)
        logger.info(f"Translated {lang} -> {out_path}")

def build_report(cfg: TranslateConfig, mode: str, outcomes: Dict[str, LanguageOutcome]) -> Dict[str, Any]:
    return {
        "input": cfg.input_path,
        "mode": mode,
        "languages": {lang: o.summary() for lang, o in outcomes.items()},
        "succeeded": sum(1 for o in outcomes.values() if o.ok),
        "failed": sum(1 for o in outcomes.values() if not o.ok),
    }

async def run(cfg: TranslateConfig, translator: Optional[Translator] = None) -> Dict[str, LanguageOutcome]:
    logger = setup_logger(cfg.log_level)
    mode = input_mode(cfg)

    logger.info(f"Reading {cfg.input_path}...")
    text = load_text(cfg.input_path)

    translator = translator or configure_translator(cfg, logger)
    client = configure_client(cfg, translator, logger)

    if mode == "json":
        doc = parse_json_document(text)
        outcomes = await translate_json(doc, cfg.languages, client, cfg.pipeline, logger=logger)
    else:
        if cfg.temp_file_path:
            save_text(cfg.temp_file_path, mask_document(text, cfg.pipeline))
            logger.debug(f"Wrote masked document to {cfg.temp_file_path}")
        outcomes = await translate_document(text, cfg.languages, client, cfg.pipeline, logger=logger)

    write_outputs(cfg, mode, outcomes, logger)

    if cfg.report_path:
        report = build_report(cfg, mode, outcomes)
        save_text(cfg.report_path, json.dumps(report, ensure_ascii=False, indent=2))
        logger.info(f"Wrote run report: {cfg.report_path}")

    failed = [lang for lang, o in outcomes.items() if not o.ok]
    if failed:
        logger.warning(f"{len(failed)} language(s) not written: {', '.join(failed)}")
    else:
        logger.info(f"All {len(outcomes)} language(s) translated.")
    return outcomes

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="deepl-i18n", description="Translate JSON locale files and html-like documents with DeepL")
    sub = ap.add_subparsers(dest="cmd", required=True)

    t = sub.add_parser("translate", help="Run translation pipeline")
    t.add_argument("--config", dest="config_path", default=None, help="YAML file with any of the settings below.")
    t.add_argument("--input", dest="input_path", default=None)
    t.add_argument("--output-pattern", default=None,
                   help="Output file name; every {language} is replaced by the target language code.")
    t.add_argument("--languages", nargs="+", default=None)
    t.add_argument("--start-tag", default=None, help="Start of a do-not-translate block in html-like files.")
    t.add_argument("--end-tag", default=None, help="End of a do-not-translate block in html-like files.")
    t.add_argument("--html-like-extensions", nargs="+", default=None)
    t.add_argument("--temp-file", dest="temp_file_path", default=None,
                   help="Also write the masked html-like document here.")
    t.add_argument("--max-request-size", dest="max_request_size_bytes", type=int, default=None)
    t.add_argument("--overhead", dest="estimated_overhead_bytes", type=int, default=None)
    t.add_argument("--max-retries", type=int, default=None)
    t.add_argument("--base-delay-ms", type=int, default=None)
    t.add_argument("--api-url", default=None)
    t.add_argument("--timeout", dest="request_timeout", type=int, default=None)
    t.add_argument("--report", dest="report_path", default=None)
    t.add_argument("--log-level", default=None)
    t.add_argument("--dry-run", action="store_true", default=None)
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = vars(build_parser().parse_args(argv))
    args.pop("cmd")
    config_path = args.pop("config_path")

    logger = setup_logger(args.get("log_level") or "INFO")
    try:
        file_values = load_config_file(config_path) if config_path else {}
        cfg = build_config(file_values, args)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_USAGE

    try:
        outcomes = asyncio.run(run(cfg))
    except ParseError as e:
        logger.error(str(e))
        return EXIT_USAGE
    except OSError as e:
        logger.error(f"File error: {e}")
        return EXIT_USAGE
    except FatalTranslationError as e:
        logger.error(str(e))
        return EXIT_PARTIAL

    return EXIT_OK if all(o.ok for o in outcomes.values()) else EXIT_PARTIAL

if __name__ == "__main__":
    sys.exit(main())
