from __future__ import annotations
from enum import Enum
from typing import Awaitable, Callable, Optional
import asyncio
import logging

from pydantic import BaseModel

from lexi.errors import ParseError
from lexi.locator import LocateResult, alocate
from lexi.pdf import PdfDocument, Resource, open_document

log = logging.getLogger("lexi.viewer")

Opener = Callable[[Resource, Optional[str]], PdfDocument]
Locator = Callable[[PdfDocument, Optional[str]], Awaitable[LocateResult]]

class ViewerStatus(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    READY = "ready"
    UNUSABLE = "unusable"

class ViewerState(BaseModel):
    doc_id: Optional[str] = None
    status: ViewerStatus = ViewerStatus.IDLE
    page_count: int = 0
    current_page: int = 1
    highlighted_page: Optional[int] = None
    is_searching: bool = False

class ViewerController:
    """Page and highlight state for one open PDF.

    All state is reset whenever a document is opened or closed. Each locate
    run is tagged with a generation number; a run whose generation is no
    longer current when it completes is dropped without touching state.
    """

    def __init__(self, opener: Opener = open_document, locator: Locator = alocate):
        self._open = opener
        self._locate = locator
        self._generation = 0
        self._reset()

    def _reset(self) -> None:
        self.document: Optional[PdfDocument] = None
        self.citation_text = ""
        self.page_count = 0
        self.current_page = 1
        self.highlighted_page: Optional[int] = None
        self.is_searching = False
        self.status = ViewerStatus.IDLE

    @property
    def doc_id(self) -> Optional[str]:
        return self.document.doc_id if self.document else None

    async def open(self, resource: Resource, citation_text: Optional[str], doc_id: Optional[str] = None) -> Optional[LocateResult]:
        self._generation += 1
        token = self._generation
        self._reset()
        try:
            document = await asyncio.to_thread(self._open, resource, doc_id)
        except ParseError:
            if token == self._generation:
                self.status = ViewerStatus.UNUSABLE
                log.warning("Document unusable", extra={"component": "viewer", "event": "unusable", "doc_id": doc_id})
            return None
        if token != self._generation:
            return None
        self.document = document
        self.page_count = document.page_count
        return await self._search(token, citation_text)

    async def set_citation(self, citation_text: Optional[str]) -> Optional[LocateResult]:
        if self.document is None:
            raise RuntimeError("No document is open")
        self._generation += 1
        self.current_page = 1
        self.highlighted_page = None
        return await self._search(self._generation, citation_text)

    def close(self) -> None:
        self._generation += 1
        self._reset()

    async def _search(self, token: int, citation_text: Optional[str]) -> Optional[LocateResult]:
        document = self.document
        self.citation_text = citation_text or ""
        self.is_searching = True
        self.status = ViewerStatus.SEARCHING

        try:
            result = await self._locate(document, citation_text)
        except Exception:
            if token == self._generation:
                self.is_searching = False
                self.status = ViewerStatus.READY
            raise

        if token != self._generation:
            log.info("Discarding stale locate result", extra={"component": "viewer", "event": "stale", "doc_id": document.doc_id})
            return None
        self.is_searching = False
        self.status = ViewerStatus.READY
        if result.found:
            self.current_page = result.page
            self.highlighted_page = result.page
        else:
            self.current_page = 1
            self.highlighted_page = None
        return result

    def go_to_page(self, page: int) -> int:
        if self.page_count == 0:
            return self.current_page
        page = max(1, min(page, self.page_count))
        if page != self.current_page:
            self.current_page = page
            # leaving the matched page drops the highlight for good
            if self.highlighted_page is not None and page != self.highlighted_page:
                self.highlighted_page = None
        return self.current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    def is_highlighted(self, page: Optional[int] = None) -> bool:
        page = self.current_page if page is None else page
        return self.highlighted_page is not None and self.highlighted_page == page

    def snapshot(self) -> ViewerState:
        return ViewerState(
            doc_id=self.doc_id,
            status=self.status,
            page_count=self.page_count,
            current_page=self.current_page,
            highlighted_page=self.highlighted_page,
            is_searching=self.is_searching,
        )
