from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, List, Optional, Protocol, Union
import logging

from pypdf import PdfReader

from lexi.errors import PageError, PageOutOfRange, ParseError

log = logging.getLogger("lexi.pdf")

Resource = Union[str, Path, bytes, BinaryIO]

class PageSource(Protocol):
    """Parsing collaborator: page count plus per-page text fragments (1-based)."""

    page_count: int

    def page_fragments(self, page_index: int) -> List[str]: ...

class PypdfSource:
    def __init__(self, reader: PdfReader):
        self._reader = reader
        self.page_count = len(reader.pages)

    def page_fragments(self, page_index: int) -> List[str]:
        fragments: List[str] = []

        def _visit(text, cm, tm, font_dict, font_size):
            fragments.append(text)

        try:
            self._reader.pages[page_index - 1].extract_text(visitor_text=_visit)
        except Exception as e:
            raise PageError(page_index, str(e)) from e
        return fragments

@dataclass(frozen=True)
class PdfDocument:
    doc_id: str
    source: PageSource

    @property
    def page_count(self) -> int:
        return self.source.page_count

def _reader_input(resource: Resource):
    if isinstance(resource, (bytes, bytearray)):
        return BytesIO(resource)
    if isinstance(resource, Path):
        return str(resource)
    return resource

def _default_doc_id(resource: Resource) -> str:
    if isinstance(resource, (str, Path)):
        return Path(resource).name
    return "inline"

def open_document(resource: Resource, doc_id: Optional[str] = None) -> PdfDocument:
    did = doc_id or _default_doc_id(resource)
    try:
        reader = PdfReader(_reader_input(resource))
        if reader.is_encrypted and not reader.decrypt(""):
            raise ParseError(f"{did}: document is password protected")
        source = PypdfSource(reader)
    except ParseError:
        raise
    except Exception as e:
        log.warning("PDF could not be opened", extra={"component": "pdf", "event": "parse_error", "doc_id": did})
        raise ParseError(f"{did}: {e}") from e
    log.info("Opened PDF", extra={"component": "pdf", "event": "open", "doc_id": did, "page_count": source.page_count})
    return PdfDocument(doc_id=did, source=source)

def extract_page_text(document: PdfDocument, page_index: int) -> str:
    """Fragments of one page in emission order, joined by single spaces."""
    if not 1 <= page_index <= document.page_count:
        raise PageOutOfRange(page_index, document.page_count)
    return " ".join(document.source.page_fragments(page_index))

def read_pages(document: PdfDocument) -> List[str]:
    pages = []
    for i in range(1, document.page_count + 1):
        try:
            pages.append(extract_page_text(document, i))
        except PageError:
            pages.append("")
    return pages
