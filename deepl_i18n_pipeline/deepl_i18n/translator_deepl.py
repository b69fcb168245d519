from __future__ import annotations
import os, logging
from typing import List, Optional

import requests

from .errors import FatalTranslationError, RateLimitedError
from .placeholder_lock import KEEP_TAG_NAME
from .translator_base import Translator

DEEPL_FREE_URL = "https://api-free.deepl.com/v2/translate"
DEEPL_PRO_URL = "https://api.deepl.com/v2/translate"

# 429 = too many requests, 529 = DeepL's "servers under high load"
RATE_LIMIT_STATUSES = {429, 529}

def default_api_url(auth_key: str) -> str:
    # free-tier keys end with ":fx" and must hit the free endpoint
    return DEEPL_FREE_URL if auth_key.endswith(":fx") else DEEPL_PRO_URL

def _post_deepl(url: str, auth_key: str, body: dict, timeout: int = 90) -> dict:
    headers = {
        "Authorization": f"DeepL-Auth-Key {auth_key}",
        "Content-Type": "application/json",
    }
    try:
        resp = requests.post(url, headers=headers, json=body, timeout=timeout)
    except requests.RequestException as e:
        raise FatalTranslationError(f"DeepL request failed: {e}") from e
    if resp.status_code in RATE_LIMIT_STATUSES:
        raise RateLimitedError(f"HTTP {resp.status_code}: {resp.text[:200]}", status=resp.status_code)
    if resp.status_code != 200:
        raise FatalTranslationError(f"HTTP {resp.status_code}: {resp.text[:200]}", status=resp.status_code)
    try:
        return resp.json()
    except ValueError as e:
        raise FatalTranslationError(f"Unexpected response: {resp.text[:200]}") from e

class DeepLTranslator(Translator):
    def __init__(self, auth_key: str | None = None, api_url: str | None = None, timeout: int = 90, logger: logging.Logger | None = None):
        self.auth_key = auth_key or os.getenv("DEEPL_API_KEY", "")
        if not self.auth_key:
            raise FatalTranslationError("DEEPL_API_KEY environment variable is not set")
        self.api_url = api_url or default_api_url(self.auth_key)
        self.timeout = timeout
        self.logger = logger or logging.getLogger("deepl-i18n")

    def build_body(self, src_texts: List[str], target_lang: str) -> dict:
        return {
            "text": list(src_texts),
            "target_lang": target_lang.upper(),
            "preserve_formatting": True,
            "tag_handling": "xml",
            "ignore_tags": [KEEP_TAG_NAME],
        }

    def translate_batch(self, src_texts: List[str], target_lang: str) -> List[Optional[str]]:
        if not src_texts:
            return []
        body = self.build_body(src_texts, target_lang)
        self.logger.debug(f"DeepL: {len(src_texts)} text(s) -> {target_lang}")
        data = _post_deepl(self.api_url, self.auth_key, body, timeout=self.timeout)
        try:
            translations = data["translations"]
        except (KeyError, TypeError):
            raise FatalTranslationError(f"Unexpected response: {str(data)[:200]}")
        if not isinstance(translations, list) or len(translations) != len(src_texts):
            raise FatalTranslationError(
                f"DeepL returned {len(translations) if isinstance(translations, list) else 'no'} "
                f"translation(s) for {len(src_texts)} text(s)"
            )
        return [t.get("text") if isinstance(t, dict) else None for t in translations]
