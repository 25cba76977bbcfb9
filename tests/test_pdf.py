import pytest

from lexi.errors import PageOutOfRange, ParseError
from lexi.locator import LocateResult, locate
from lexi.pdf import extract_page_text, open_document, read_pages

def test_open_pdf_bytes(make_pdf):
    doc = open_document(make_pdf([["Intro section."], ["Second page text."]]), doc_id="demo.pdf")
    assert doc.doc_id == "demo.pdf"
    assert doc.page_count == 2
    assert "Second page text" in extract_page_text(doc, 2)

def test_open_pdf_path_uses_file_name(make_pdf, tmp_path):
    p = tmp_path / "Dani Vs Pritam.pdf"
    p.write_bytes(make_pdf([["only page"]]))
    doc = open_document(p)
    assert doc.doc_id == "Dani Vs Pritam.pdf"
    assert doc.page_count == 1

def test_page_out_of_range(make_pdf):
    doc = open_document(make_pdf([["a"]]))
    with pytest.raises(PageOutOfRange):
        extract_page_text(doc, 0)
    with pytest.raises(PageOutOfRange):
        extract_page_text(doc, 2)

def test_empty_bytes_is_parse_error():
    with pytest.raises(ParseError):
        open_document(b"")

def test_missing_file_is_parse_error(tmp_path):
    with pytest.raises(ParseError):
        open_document(tmp_path / "missing.pdf")

def test_locate_in_real_pdf(make_pdf):
    doc = open_document(make_pdf([
        ["Intro section, nothing relevant here."],
        ["As the age of the deceased at the time of", "accident was held to be about 54-55 years"],
        ["Costs are awarded."],
    ]))
    assert locate(doc, "was held to be about 54-55 years") == LocateResult.found_at(2)

def test_read_pages(make_pdf):
    pages = read_pages(open_document(make_pdf([["alpha"], ["beta"]])))
    assert len(pages) == 2
    assert "alpha" in pages[0]
    assert "beta" in pages[1]
