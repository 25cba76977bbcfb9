from __future__ import annotations
from typing import Optional
import regex as re

_DISALLOWED_RE = re.compile(r"[^a-z0-9\s]")
_WS_RE = re.compile(r"\s+")

def normalize(text: Optional[str]) -> str:
    """Canonical form used on both sides of a citation match.

    Lower-cases, drops everything but ASCII letters, digits and whitespace,
    then collapses whitespace runs to one space and trims. The steps run in
    this order so that the result is idempotent.
    """
    if not text:
        return ""
    text = text.lower()
    text = _DISALLOWED_RE.sub("", text)
    text = _WS_RE.sub(" ", text)
    return text.strip()
