from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import asyncio
import logging

from lexi.errors import PageError
from lexi.normalize import normalize
from lexi.pdf import PdfDocument, extract_page_text

log = logging.getLogger("lexi.locator")

@dataclass(frozen=True)
class LocateResult:
    page: Optional[int] = None
    pages_scanned: int = field(default=0, compare=False)

    @property
    def found(self) -> bool:
        return self.page is not None

    @classmethod
    def found_at(cls, page: int, pages_scanned: int = 0) -> "LocateResult":
        return cls(page=page, pages_scanned=pages_scanned)

NOT_FOUND = LocateResult()

def _page_text(document: PdfDocument, page: int) -> str:
    try:
        return extract_page_text(document, page)
    except PageError as e:
        log.warning(
            "Page extraction failed (%s); treating page as empty",
            e.reason,
            extra={"component": "locator", "event": "page_error", "doc_id": document.doc_id, "page": page},
        )
        return ""

def _matches(document: PdfDocument, page: int, raw: str, target: str) -> bool:
    matched = target in normalize(raw)
    log.debug(
        "Scanned page",
        extra={"component": "locator", "event": "page_scan", "doc_id": document.doc_id, "page": page, "matched": matched},
    )
    return matched

def _finish(document: PdfDocument, result: LocateResult) -> LocateResult:
    log.info(
        "Citation found" if result.found else "Citation not found",
        extra={
            "component": "locator",
            "event": "locate",
            "doc_id": document.doc_id,
            "page": result.page,
            "pages_scanned": result.pages_scanned,
        },
    )
    return result

def locate(document: PdfDocument, citation_text: Optional[str]) -> LocateResult:
    """Return the first page whose normalized text contains the normalized citation.

    Pages are scanned in ascending order and each is extracted at most once.
    A page that fails to extract counts as empty text. An empty citation is
    never searched for.
    """
    target = normalize(citation_text)
    if not target:
        return NOT_FOUND

    for page in range(1, document.page_count + 1):
        if _matches(document, page, _page_text(document, page), target):
            return _finish(document, LocateResult.found_at(page, pages_scanned=page))
    return _finish(document, LocateResult(pages_scanned=document.page_count))

async def alocate(document: PdfDocument, citation_text: Optional[str]) -> LocateResult:
    """Same scan as `locate`, yielding to the event loop once per page.

    Extraction runs in a worker thread; pages are still extracted one after
    another, never overlapping.
    """
    target = normalize(citation_text)
    if not target:
        return NOT_FOUND

    for page in range(1, document.page_count + 1):
        raw = await asyncio.to_thread(_page_text, document, page)
        if _matches(document, page, raw, target):
            return _finish(document, LocateResult.found_at(page, pages_scanned=page))
    return _finish(document, LocateResult(pages_scanned=document.page_count))
