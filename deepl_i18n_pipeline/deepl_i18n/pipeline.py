from __future__ import annotations
import asyncio, logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .batcher import batch_by_size, utf8_size
from .config import PipelineConfig
from .errors import ParseError, UndefinedTranslationError
from .flattener import collect_strings
from .placeholder_lock import lock_placeholders, replace_keep_block_tags, unlock_placeholders
from .rebuilder import build_output_json
from .retry import RetryingTranslateClient
from .validators import ValidationIssue, check_placeholder_parity

STATUS_OK = "ok"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"

@dataclass
class BatchResult:
    lang: str
    index: int
    texts: List[Optional[str]]

@dataclass
class TranslationResult:
    target_lang: str
    texts: List[Optional[str]]
    batches: int = 0

@dataclass
class LanguageOutcome:
    lang: str
    status: str
    output: Any = None
    error: Optional[BaseException] = None
    strings: int = 0
    batches: int = 0
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def summary(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "strings": self.strings,
            "batches": self.batches,
            "issues": len(self.issues),
            "error": f"{type(self.error).__name__}: {self.error}" if self.error else None,
        }

def unique_preserve_order(seq: Iterable[str]) -> List[str]:
    seen, out = set(), []
    for s in seq:
        if s not in seen:
            seen.add(s); out.append(s)
    return out

def assemble_batches(results: Iterable[BatchResult]) -> List[Optional[str]]:
    out: List[Optional[str]] = []
    for r in sorted(results, key=lambda r: r.index):
        out.extend(r.texts)
    return out

async def _translate_indexed_batch(client: RetryingTranslateClient, batch: List[str], lang: str, index: int) -> BatchResult:
    texts = await client.translate_batch(batch, lang)
    return BatchResult(lang=lang, index=index, texts=texts)

async def translate_strings(
    texts: Sequence[str],
    target_lang: str,
    client: RetryingTranslateClient,
    config: PipelineConfig,
) -> TranslationResult:
    """
    Translate already-locked texts into one language.

    Batches are sent concurrently and put back together by batch index, so the
    result lines up with `texts` whatever order the responses arrive in.
    """
    batches = batch_by_size(texts, config.max_text_size_bytes)
    results = await asyncio.gather(*(
        _translate_indexed_batch(client, batch, target_lang, i) for i, batch in enumerate(batches)
    ))
    return TranslationResult(target_lang=target_lang, texts=assemble_batches(results), batches=len(batches))

async def _translate_json_language(
    keys: List[str],
    values: List[str],
    locked: List[str],
    lang: str,
    client: RetryingTranslateClient,
    config: PipelineConfig,
    logger: logging.Logger,
) -> LanguageOutcome:
    translated = await translate_strings(locked, lang, client, config)

    final: List[str] = []
    issues: List[ValidationIssue] = []
    for key, src, tgt in zip(keys, values, translated.texts):
        if tgt is None:
            logger.warning(f"[{lang}] no translation for '{key}', falling back to source text")
            final.append(src)
            continue
        plain = unlock_placeholders(tgt)
        issues.extend(check_placeholder_parity(src, plain, lang, key=key))
        final.append(plain)

    if issues:
        logger.warning(f"[{lang}] {len(issues)} placeholder mismatch(es)")
        for issue in issues:
            logger.debug(f"[{lang}] {issue.key}: {issue.detail}")

    return LanguageOutcome(
        lang=lang,
        status=STATUS_OK,
        output=build_output_json(final, keys),
        strings=len(keys),
        batches=translated.batches,
        issues=issues,
    )

def _collect_outcomes(languages: List[str], results: List[Any], logger: logging.Logger) -> Dict[str, LanguageOutcome]:
    outcomes: Dict[str, LanguageOutcome] = {}
    for lang, res in zip(languages, results):
        if isinstance(res, LanguageOutcome):
            outcomes[lang] = res
        elif isinstance(res, UndefinedTranslationError):
            logger.warning(f"Got no translated text, skipping {lang}")
            outcomes[lang] = LanguageOutcome(lang=lang, status=STATUS_SKIPPED, error=res)
        elif isinstance(res, Exception):
            logger.error(f"Translation into {lang} failed: {type(res).__name__}: {res}")
            outcomes[lang] = LanguageOutcome(lang=lang, status=STATUS_FAILED, error=res)
        else:
            # CancelledError and friends are not ours to swallow
            raise res
    return outcomes

async def translate_json(
    doc: Any,
    languages: Sequence[str],
    client: RetryingTranslateClient,
    config: PipelineConfig,
    logger: logging.Logger | None = None,
) -> Dict[str, LanguageOutcome]:
    """Translate every string leaf of a JSON object into each language, keeping its shape."""
    logger = logger or logging.getLogger("deepl-i18n")
    if not isinstance(doc, dict):
        raise ParseError(f"Expected a JSON object at the top level, got {type(doc).__name__}")

    keys, values = collect_strings(doc)
    locked = [lock_placeholders(v) for v in values]
    langs = unique_preserve_order(languages)
    logger.info(f"Translating {len(values)} string(s) into {len(langs)} language(s)...")

    results = await asyncio.gather(
        *(_translate_json_language(keys, values, locked, lang, client, config, logger) for lang in langs),
        return_exceptions=True,
    )
    return _collect_outcomes(langs, results, logger)

def mask_document(text: str, config: PipelineConfig) -> str:
    tags = config.keep_tags
    if not tags:
        return text
    return replace_keep_block_tags(text, *tags)

async def _translate_document_language(
    masked: str,
    lang: str,
    client: RetryingTranslateClient,
) -> LanguageOutcome:
    out = await client.translate_batch([masked], lang)
    if out[0] is None:
        raise UndefinedTranslationError(lang)
    return LanguageOutcome(lang=lang, status=STATUS_OK, output=unlock_placeholders(out[0]), strings=1, batches=1)

async def translate_document(
    text: str,
    languages: Sequence[str],
    client: RetryingTranslateClient,
    config: PipelineConfig,
    logger: logging.Logger | None = None,
) -> Dict[str, LanguageOutcome]:
    """Translate a whole html/markdown-like document into each language with one call per language."""
    logger = logger or logging.getLogger("deepl-i18n")
    masked = mask_document(text, config)
    if utf8_size(masked) > config.max_text_size_bytes:
        logger.warning(
            f"Document is {utf8_size(masked)} bytes, above the {config.max_text_size_bytes} byte "
            "request budget; sending it in one request anyway"
        )
    langs = unique_preserve_order(languages)
    logger.info(f"Translating the input document into {len(langs)} language(s)...")

    results = await asyncio.gather(
        *(_translate_document_language(masked, lang, client) for lang in langs),
        return_exceptions=True,
    )
    return _collect_outcomes(langs, results, logger)
