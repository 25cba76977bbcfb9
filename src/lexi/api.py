from __future__ import annotations
from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel
from typing import List, Optional
import logging

from lexi.answer import AnswerService, build_answer_service, check_question
from lexi.citations import resolve_document_link, strip_para_reference
from lexi.config import get_settings
from lexi.logging import configure_logging
from lexi.schemas import Citation
from lexi.viewer import ViewerController, ViewerStatus

log = logging.getLogger("lexi.api")

app = FastAPI(title="Lexi Legal Assistant API", version="0.1.0")

class AskRequest(BaseModel):
    question: str

class AskResponse(BaseModel):
    answer_text: str
    citations: List[Citation]

class LocateRequest(BaseModel):
    document_link: str
    citation_text: Optional[str] = None
    strip_para_reference: bool = True

class LocateResponse(BaseModel):
    document_link: str
    page_count: int
    current_page: int
    highlighted_page: Optional[int]
    found: bool
    pages_scanned: int

_state = {}

def _init_once():
    if _state:
        return
    s = get_settings()
    configure_logging()
    _state.update({"s": s, "answers": build_answer_service(s)})

@app.get("/health")
def health():
    _init_once()
    return {"status": "ok"}

@app.post("/ask", response_model=AskResponse)
async def ask(req: AskRequest):
    _init_once()
    service: AnswerService = _state["answers"]
    try:
        question = check_question(req.question)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        answer = await service.answer(question)
    except ValueError:
        log.exception("Answer service returned unusable output", extra={"component": "api", "event": "answer_error"})
        raise HTTPException(status_code=502, detail="answer service returned invalid output")
    return AskResponse(answer_text=answer.answer_text, citations=answer.citations)

@app.post("/locate", response_model=LocateResponse)
async def locate(req: LocateRequest):
    _init_once()
    s = _state["s"]
    try:
        path = resolve_document_link(req.document_link, s.docs_dir)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown document: {req.document_link}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    text = req.citation_text or ""
    if req.strip_para_reference:
        text = strip_para_reference(text)

    viewer = ViewerController()
    result = await viewer.open(path, text)
    if viewer.status == ViewerStatus.UNUSABLE:
        raise HTTPException(status_code=422, detail="document unusable")

    return LocateResponse(
        document_link=req.document_link,
        page_count=viewer.page_count,
        current_page=viewer.current_page,
        highlighted_page=viewer.highlighted_page,
        found=viewer.highlighted_page is not None,
        pages_scanned=result.pages_scanned if result else 0,
    )

@app.get("/documents/{name}")
def document(name: str):
    _init_once()
    s = _state["s"]
    try:
        path = resolve_document_link(name, s.docs_dir)
    except (FileNotFoundError, ValueError):
        raise HTTPException(status_code=404, detail=f"Unknown document: {name}")
    return FileResponse(path, media_type="application/pdf", filename=path.name)
