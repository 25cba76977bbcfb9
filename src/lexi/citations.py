from __future__ import annotations
from pathlib import Path
from urllib.parse import unquote
import re

_PARA_REF_RE = re.compile(r"\s*\(Para \d+ of the document\)")

def strip_para_reference(text: str) -> str:
    """Drop editorial "(Para N of the document)" markers the source PDF never contains."""
    return _PARA_REF_RE.sub("", text or "").strip()

def document_link(filename: str) -> str:
    return "/" + filename

def resolve_document_link(link: str, docs_dir: Path) -> Path:
    root = docs_dir.resolve()
    name = unquote(link).lstrip("/")
    if not name:
        raise ValueError("Empty document link")
    path = (root / name).resolve()
    if root not in path.parents:
        raise ValueError(f"Document link outside library: {link}")
    if not path.is_file():
        raise FileNotFoundError(link)
    return path
