from __future__ import annotations
import asyncio, logging
from typing import Awaitable, Callable, List, Optional

from .errors import FatalTranslationError, ProviderExhaustedError, RateLimitedError
from .translator_base import Translator

SleepFn = Callable[[float], Awaitable[None]]

def backoff_delay_ms(retry_number: int, base_delay_ms: int) -> int:
    """Delay before the retry_number-th retry (1-indexed): base, 2*base, 4*base, ..."""
    return base_delay_ms * 2 ** (retry_number - 1)

class RetryingTranslateClient:
    """
    Async wrapper around a blocking Translator.

    Rate-limited batches are retried with exponential backoff; everything else
    propagates on the first failure. The provider call runs in a worker thread
    and delays use asyncio.sleep, so only the awaiting task is held up.
    """

    def __init__(
        self,
        translator: Translator,
        max_retries: int = 5,
        base_delay_ms: int = 1000,
        sleep: Optional[SleepFn] = None,
        logger: logging.Logger | None = None,
    ):
        self.translator = translator
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.sleep = sleep or asyncio.sleep
        self.logger = logger or logging.getLogger("deepl-i18n")

    async def translate_batch(self, batch: List[str], target_lang: str) -> List[Optional[str]]:
        retry = 0
        while True:
            try:
                out = await asyncio.to_thread(self.translator.translate_batch, batch, target_lang)
            except RateLimitedError as e:
                if retry >= self.max_retries:
                    raise ProviderExhaustedError(
                        f"Still rate limited after {retry + 1} attempt(s) for {target_lang}: {e}",
                        attempts=retry + 1,
                        status=e.status,
                    ) from e
                retry += 1
                delay_ms = backoff_delay_ms(retry, self.base_delay_ms)
                self.logger.warning(
                    f"Rate limited ({target_lang}, {len(batch)} text(s)); "
                    f"retry {retry}/{self.max_retries} in {delay_ms / 1000:.1f}s"
                )
                await self.sleep(delay_ms / 1000.0)
                continue

            if out is None or len(out) != len(batch):
                raise FatalTranslationError(
                    f"Provider returned {0 if out is None else len(out)} result(s) "
                    f"for a batch of {len(batch)} ({target_lang})"
                )
            return list(out)
