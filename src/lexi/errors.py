from __future__ import annotations


class LexiError(Exception):
    pass


class ParseError(LexiError):
    """The PDF could not be opened at all; the document is unusable."""


class PageError(LexiError):
    def __init__(self, page: int, reason: str):
        super().__init__(f"page {page}: {reason}")
        self.page = page
        self.reason = reason


class PageOutOfRange(PageError):
    def __init__(self, page: int, page_count: int):
        super().__init__(page, f"out of range [1, {page_count}]")
        self.page_count = page_count
