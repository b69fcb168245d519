from __future__ import annotations
from typing import Any, Dict, List, Sequence

from .paths import decode_path

def build_output_json(translated_values: Sequence[str], keys: Sequence[str]) -> Dict[str, Any]:
    """Inverse of collect_strings: put each value back at its dot-notation path."""
    if len(translated_values) != len(keys):
        raise ValueError(f"Got {len(translated_values)} values for {len(keys)} keys")

    out: Dict[str, Any] = {}
    for value, key in zip(translated_values, keys):
        segments: List[str] = decode_path(key)
        node = out
        for seg in segments[:-1]:
            child = node.get(seg)
            if not isinstance(child, dict):
                child = {}
                node[seg] = child
            node = child
        node[segments[-1]] = value
    return out
