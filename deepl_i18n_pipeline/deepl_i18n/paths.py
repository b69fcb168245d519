from __future__ import annotations
import re
from typing import List

# a dot that is not escaped by a preceding backslash
UNESCAPED_DOT_RE = re.compile(r"(?<!\\)\.")

def encode_segment(key: str) -> str:
    return key.replace(".", "\\.")

def decode_segment(segment: str) -> str:
    return segment.replace("\\.", ".")

def join_path(prefix: str, segment: str) -> str:
    return f"{prefix}.{segment}" if prefix else segment

def split_path(path: str) -> List[str]:
    """Split an encoded path into its (still escaped) segments."""
    return UNESCAPED_DOT_RE.split(path)

def decode_path(path: str) -> List[str]:
    return [decode_segment(seg) for seg in split_path(path)]
