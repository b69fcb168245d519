from __future__ import annotations
from typing import Optional


class TranslationPipelineError(Exception):
    """Base class for every error raised by the pipeline."""


class ParseError(TranslationPipelineError):
    """Input document could not be decoded into something we can translate."""


class RateLimitedError(TranslationPipelineError):
    def __init__(self, message: str = "Too many requests", status: Optional[int] = 429) -> None:
        super().__init__(message)
        self.status = status


class ProviderExhaustedError(RateLimitedError):
    """Raised once the retry budget for a rate-limited batch is spent."""

    def __init__(self, message: str, attempts: int, status: Optional[int] = 429) -> None:
        super().__init__(message, status=status)
        self.attempts = attempts


class FatalTranslationError(TranslationPipelineError):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class UndefinedTranslationError(TranslationPipelineError):
    """Provider answered without any text for a document."""

    def __init__(self, target_lang: str) -> None:
        super().__init__(f"Provider returned no text for {target_lang}")
        self.target_lang = target_lang
