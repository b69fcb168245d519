from __future__ import annotations
from typing import List
from dataclasses import dataclass

from .placeholder_lock import PARAMETER_RE

@dataclass
class ValidationIssue:
    kind: str
    detail: str
    source: str
    target: str
    lang: str
    key: str = ""

def check_placeholder_parity(source: str, target: str, lang: str, key: str = "") -> List[ValidationIssue]:
    src = sorted(PARAMETER_RE.findall(source))
    tgt = sorted(PARAMETER_RE.findall(target))
    issues = []
    if src != tgt:
        missing = [p for p in src if p not in tgt]
        detail = f"Placeholder mismatch, missing {missing}" if missing else "Placeholder mismatch"
        issues.append(ValidationIssue("placeholder_parity", detail, source, target, lang, key))
    return issues
