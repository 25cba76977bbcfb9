from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

class Citation(BaseModel):
    snippet_text: str = Field(description="Verbatim excerpt from the source document")
    source_label: str = Field(description="File name of the source document")
    document_link: Optional[str] = Field(default=None, description="Link the viewer opens, e.g. /<file name>")

class Answer(BaseModel):
    answer_text: str
    citations: List[Citation] = Field(default_factory=list)
