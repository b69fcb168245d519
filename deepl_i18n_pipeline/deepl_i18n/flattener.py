from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from .paths import encode_segment, join_path

_DONE = object()

@dataclass
class CollectedStrings:
    keys: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    def __iter__(self):
        # lets callers unpack: keys, values = collect_strings(doc)
        return iter((self.keys, self.values))

    def __len__(self) -> int:
        return len(self.keys)

def collect_strings(obj: Dict[str, Any], prefix: str = "") -> CollectedStrings:
    """
    Collect every string leaf of a nested dict along with its dot-notation path.

    Literal dots inside keys are escaped (``\\.``) so they cannot be confused with
    nesting. Lists, numbers, booleans and None are skipped. The walk is depth-first,
    pre-order, and uses an explicit stack so arbitrarily deep documents are fine.

    >>> collect_strings({"user.name": "John", "user": {"age": "30"}}).keys
    ['user\\\\.name', 'user.age']
    """
    out = CollectedStrings()
    stack: List[Tuple[Dict[str, Any], str, Iterator[str]]] = [(obj, prefix, iter(list(obj.keys())))]

    while stack:
        current, current_prefix, pending = stack[-1]
        key = next(pending, _DONE)
        if key is _DONE:
            stack.pop()
            continue

        value = current[key]
        path = join_path(current_prefix, encode_segment(str(key)))
        if isinstance(value, str):
            out.keys.append(path)
            out.values.append(value)
        elif isinstance(value, dict):
            stack.append((value, path, iter(list(value.keys()))))

    return out
