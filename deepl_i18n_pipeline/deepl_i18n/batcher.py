from __future__ import annotations
from typing import List, Sequence

def utf8_size(text: str) -> int:
    return len(text.encode("utf-8"))

def batch_by_size(texts: Sequence[str], max_text_size_bytes: int) -> List[List[str]]:
    """
    Greedily pack texts into ordered batches of at most max_text_size_bytes (UTF-8).

    A text is never split; one that is larger than the ceiling on its own is sent
    alone in its own batch.
    """
    if max_text_size_bytes <= 0:
        raise ValueError(f"max_text_size_bytes must be positive, got {max_text_size_bytes}")

    batches: List[List[str]] = []
    cur: List[str] = []
    cur_bytes = 0
    for text in texts:
        size = utf8_size(text)
        if cur and cur_bytes + size > max_text_size_bytes:
            batches.append(cur)
            cur, cur_bytes = [], 0
        cur.append(text)
        cur_bytes += size
    if cur:
        batches.append(cur)
    return batches
