from __future__ import annotations
import re

KEEP_START = "<keep>"
KEEP_END = "</keep>"
# the tag name DeepL is told to leave alone (ignore_tags)
KEEP_TAG_NAME = "keep"

# {{name}} is tried first so it is wrapped whole, not as {{name} + }
PARAMETER_RE = re.compile(r"(\{\{.*?\}\}|\{.*?\})")

def replace_all(text: str, search: str, replacement: str) -> str:
    if not search:
        return text
    return text.replace(search, replacement)

def lock_placeholders(text: str) -> str:
    """
    Wrap {param} / {{param}} placeholders in <keep> tags so the provider leaves them as-is.

    >>> lock_placeholders("Hi {{name}}")
    'Hi <keep>{{name}}</keep>'
    """
    return PARAMETER_RE.sub(lambda m: f"{KEEP_START}{m.group(0)}{KEEP_END}", text)

def replace_keep_block_tags(text: str, start_tag: str, end_tag: str) -> str:
    """Swap user-configured do-not-translate tags (e.g. <!-- keep -->) for <keep> markers."""
    text = replace_all(text, start_tag, KEEP_START)
    return replace_all(text, end_tag, KEEP_END)

def unlock_placeholders(text: str) -> str:
    if KEEP_START not in text:
        return text
    text = replace_all(text, KEEP_START, "")
    return replace_all(text, KEEP_END, "")
