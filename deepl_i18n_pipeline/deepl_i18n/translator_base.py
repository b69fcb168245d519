from abc import ABC, abstractmethod
from typing import List, Optional

class Translator(ABC):
    @abstractmethod
    def translate_batch(self, src_texts: List[str], target_lang: str) -> List[Optional[str]]:
        """
        Translate src_texts into target_lang, same length and order.

        Raise RateLimitedError when the provider throttles us, anything else is fatal.
        An entry may be None when the provider sent back no text for it.
        """
        ...

class IdentityTranslator(Translator):
    """Returns the input unchanged; used for --dry-run."""

    def translate_batch(self, src_texts: List[str], target_lang: str) -> List[Optional[str]]:
        return list(src_texts)
