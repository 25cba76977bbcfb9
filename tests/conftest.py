from typing import List, Sequence, Union

import pytest

from lexi.errors import PageError
from lexi.pdf import PdfDocument

Page = Union[Sequence[str], Exception]

class FakeSource:
    """In-memory parsing collaborator; records which pages were requested."""

    def __init__(self, pages: Sequence[Page]):
        self._pages = list(pages)
        self.page_count = len(self._pages)
        self.calls: List[int] = []

    def page_fragments(self, page_index: int) -> List[str]:
        self.calls.append(page_index)
        page = self._pages[page_index - 1]
        if isinstance(page, Exception):
            raise page
        return list(page)

def _escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")

def build_pdf(pages: Sequence[Sequence[str]]) -> bytes:
    """Minimal PDF with one Helvetica text line per entry on each page."""
    kids = [4 + 2 * i for i in range(len(pages))]
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        ("<< /Type /Pages /Kids [%s] /Count %d >>" % (" ".join(f"{k} 0 R" for k in kids), len(pages))).encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
    ]
    for i, lines in enumerate(pages):
        ops = ["BT", "/F1 12 Tf", "72 720 Td"]
        for line in lines:
            ops.append(f"({_escape(line)}) Tj")
            ops.append("0 -16 Td")
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                "/Resources << /Font << /F1 3 0 R >> >> /Contents %d 0 R >>" % (5 + 2 * i)
            ).encode()
        )
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref)
    return bytes(out)

@pytest.fixture
def fake_document():
    def _make(pages: Sequence[Page], doc_id: str = "fake.pdf") -> PdfDocument:
        return PdfDocument(doc_id=doc_id, source=FakeSource(pages))
    return _make

@pytest.fixture
def make_pdf():
    return build_pdf

@pytest.fixture
def page_error():
    def _make(page: int) -> PageError:
        return PageError(page, "broken content stream")
    return _make
