from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Protocol
import asyncio
import logging

from aiolimiter import AsyncLimiter
from openai import AsyncOpenAI
from pydantic import ValidationError

from lexi.chunking import Chunk, build_page_chunks
from lexi.citations import document_link
from lexi.config import LexiSettings
from lexi.errors import ParseError
from lexi.llm import AsyncLLMClient
from lexi.normalize import normalize
from lexi.pdf import open_document, read_pages
from lexi.postprocess import coerce_answer_fields, extract_json_object
from lexi.prompts import build_answer_messages
from lexi.schemas import Answer, Citation

log = logging.getLogger("lexi.answer")

SIMULATED_ANSWER = Answer(
    answer_text=(
        "Yes, under Section 166 of the Motor Vehicles Act, 1988, the claimants are entitled to an "
        "addition for future prospects even when the deceased was self-employed and aged 54–55 "
        "years at the time of the accident. In Dani Devi v. Pritam Singh, the Court held that 10% of "
        "the deceased’s annual income should be added as future prospects."
    ),
    citations=[
        Citation(
            snippet_text=(
                "“as the age of the deceased at the time of accident was held to be about 54-55 years "
                "by the learned Tribunal, being self-employed, as such, 10% of annual income should have "
                "been awarded on account of future prospects.” (Para 7 of the document)"
            ),
            source_label="Dani_Devi_v_Pritam_Singh.pdf",
            document_link="/Dani Vs Pritam (Future 10 at age 54-55).pdf",
        )
    ],
)

class AnswerService(Protocol):
    async def answer(self, question: str) -> Answer: ...

def check_question(question: str) -> str:
    q = (question or "").strip()
    if not q:
        raise ValueError("Question must not be empty")
    return q

class SimulatedAnswerService:
    """Stands in for the QA backend: waits, then returns a fixed answer."""

    def __init__(self, delay_s: float = 1.5):
        self._delay_s = delay_s

    async def answer(self, question: str) -> Answer:
        check_question(question)
        await asyncio.sleep(self._delay_s)
        return SIMULATED_ANSWER.model_copy(deep=True)

def _validate(obj) -> Answer:
    return Answer.model_validate(coerce_answer_fields(obj))

class LLMAnswerService:
    """Answers from the PDFs in `docs_dir`, citing excerpts the model was shown."""

    def __init__(self, llm_client, settings: LexiSettings):
        self._llm = llm_client
        self._s = settings

    def _library(self) -> List[Path]:
        if not self._s.docs_dir.is_dir():
            return []
        return sorted(p for p in self._s.docs_dir.iterdir() if p.suffix.lower() == ".pdf")

    def _load_chunks(self) -> List[Chunk]:
        chunks: List[Chunk] = []
        for path in self._library():
            try:
                doc = open_document(path)
            except ParseError:
                continue
            chunks.extend(build_page_chunks(doc.doc_id, read_pages(doc), self._s.chunk_size, self._s.chunk_overlap))
        return chunks

    def _select(self, question: str, chunks: List[Chunk]) -> List[Chunk]:
        terms = set(normalize(question).split())
        scored = sorted(
            enumerate(chunks),
            key=lambda ic: (-len(terms & set(normalize(ic[1].text).split())), ic[0]),
        )
        return [c for _, c in scored[: self._s.max_context_chunks]]

    def _attach_links(self, answer: Answer, known: Dict[str, str]) -> Answer:
        kept = []
        for c in answer.citations:
            if c.source_label not in known:
                log.warning("Dropping citation to unknown source", extra={"component": "answer", "event": "unknown_source", "doc_id": c.source_label})
                continue
            kept.append(c.model_copy(update={"document_link": known[c.source_label]}))
        return answer.model_copy(update={"citations": kept})

    async def answer(self, question: str) -> Answer:
        q = check_question(question)
        chunks = await asyncio.to_thread(self._load_chunks)
        selected = self._select(q, chunks)
        known = {c.doc_id: document_link(c.doc_id) for c in chunks}

        messages = build_answer_messages(q, selected)
        raw = await self._llm.complete(messages)
        try:
            answer = _validate(extract_json_object(raw))
        except (ValueError, ValidationError):
            log.warning("Invalid JSON; requesting corrected output", extra={"component": "answer", "event": "repair"})
            fix_messages = messages + [
                {"role": "assistant", "content": raw},
                {"role": "user", "content": "Your previous output was invalid. Return ONLY corrected JSON matching the schema."},
            ]
            raw2 = await self._llm.complete(fix_messages)
            answer = _validate(extract_json_object(raw2))
        return self._attach_links(answer, known)

def build_answer_service(settings: LexiSettings) -> AnswerService:
    if settings.answer_backend == "openai":
        limiter = AsyncLimiter(max_rate=settings.max_rps, time_period=1) if settings.max_rps > 0 else None
        llm = AsyncLLMClient(AsyncOpenAI(), settings.llm_model, settings.max_retries, settings.request_timeout_s, limiter=limiter)
        return LLMAnswerService(llm, settings)
    return SimulatedAnswerService(delay_s=settings.simulated_delay_s)
