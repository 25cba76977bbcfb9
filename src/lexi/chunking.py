from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import regex as re

@dataclass(frozen=True)
class Chunk:
    doc_id: str
    page: int
    chunk_id: int
    text: str

_SENTENCE_SPLIT_RE = re.compile(r"\n\n+|(?<=[.!?])\s+")

def chunk_text(text: str, chunk_size: int, chunk_overlap: int) -> List[str]:
    """Pack sentences into pieces of at most `chunk_size` characters.

    Sentences longer than a piece are cut with a sliding window whose step
    already overlaps by `chunk_overlap`. Any other piece after the first is
    prefixed with the last `chunk_overlap` characters of the piece before it,
    so a returned chunk holds at most `chunk_size + chunk_overlap + 1`
    characters.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be < chunk_size")

    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s and s.strip()]

    # (text, windowed)
    packed: List[Tuple[str, bool]] = []
    buf = ""
    for sentence in sentences:
        if len(sentence) > chunk_size:
            if buf:
                packed.append((buf, False))
                buf = ""
            step = chunk_size - chunk_overlap
            packed.extend((sentence[i:i + chunk_size], True) for i in range(0, len(sentence), step))
            continue
        candidate = f"{buf} {sentence}" if buf else sentence
        if len(candidate) <= chunk_size:
            buf = candidate
        else:
            packed.append((buf, False))
            buf = sentence
    if buf:
        packed.append((buf, False))

    if chunk_overlap == 0 or len(packed) < 2:
        return [t for t, _ in packed]
    out = [packed[0][0]]
    for (prev, _), (cur, windowed) in zip(packed, packed[1:]):
        out.append(cur if windowed else f"{prev[-chunk_overlap:]} {cur}".strip())
    return out

def build_page_chunks(doc_id: str, pages: Sequence[str], chunk_size: int, chunk_overlap: int) -> List[Chunk]:
    """Chunk each page separately so every chunk keeps its 1-based page number."""
    chunks: List[Chunk] = []
    for page_no, page_text in enumerate(pages, start=1):
        for text in chunk_text(page_text, chunk_size, chunk_overlap):
            chunks.append(Chunk(doc_id=doc_id, page=page_no, chunk_id=len(chunks), text=text))
    return chunks
