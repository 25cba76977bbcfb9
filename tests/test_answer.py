import asyncio
import json

import pytest

from lexi.answer import LLMAnswerService, SimulatedAnswerService, build_answer_service
from lexi.chunking import Chunk
from lexi.citations import strip_para_reference
from lexi.config import LexiSettings
from lexi.normalize import normalize

class FakeLLM:
    def __init__(self, replies):
        self._replies = list(replies)
        self.calls = []

    async def complete(self, messages):
        self.calls.append(messages)
        return self._replies.pop(0)

def test_simulated_answer():
    answer = asyncio.run(SimulatedAnswerService(delay_s=0).answer("Is future prospects addition allowed?"))
    assert "Dani Devi v. Pritam Singh" in answer.answer_text
    c = answer.citations[0]
    assert c.document_link == "/Dani Vs Pritam (Future 10 at age 54-55).pdf"
    assert normalize(strip_para_reference(c.snippet_text)).startswith("as the age of the deceased")

def test_simulated_rejects_blank_question():
    with pytest.raises(ValueError):
        asyncio.run(SimulatedAnswerService(delay_s=0).answer("   "))

def test_build_answer_service_default():
    s = LexiSettings(simulated_delay_s=0)
    assert isinstance(build_answer_service(s), SimulatedAnswerService)

def test_llm_answer_repairs_and_links(tmp_path, make_pdf):
    (tmp_path / "Dani.pdf").write_bytes(make_pdf([
        ["Intro section."],
        ["The deceased was about 54-55 years and self-employed."],
    ]))
    (tmp_path / "broken.pdf").write_bytes(b"")
    valid = json.dumps({
        "answer_text": "Yes, 10% is added.",
        "citations": [
            {"snippet_text": "about 54-55 years", "source_label": "Dani.pdf"},
            {"snippet_text": "made up", "source_label": "Other.pdf"},
        ],
    })
    llm = FakeLLM(["I cannot answer in JSON", valid])
    settings = LexiSettings(docs_dir=tmp_path, chunk_size=200, chunk_overlap=0, max_context_chunks=4)

    answer = asyncio.run(LLMAnswerService(llm, settings).answer("What age was the deceased?"))

    assert len(llm.calls) == 2
    assert "previous output was invalid" in llm.calls[1][-1]["content"]
    user = json.loads(llm.calls[0][1]["content"])
    assert user["question"] == "What age was the deceased?"
    assert {e["source"] for e in user["excerpts"]} == {"Dani.pdf"}
    assert answer.answer_text == "Yes, 10% is added."
    assert [(c.source_label, c.document_link) for c in answer.citations] == [("Dani.pdf", "/Dani.pdf")]

def test_context_prefers_chunks_sharing_question_terms(tmp_path):
    settings = LexiSettings(docs_dir=tmp_path, max_context_chunks=2)
    service = LLMAnswerService(FakeLLM([]), settings)
    chunks = [
        Chunk("a.pdf", 1, 0, "costs are awarded"),
        Chunk("a.pdf", 2, 1, "future prospects for the deceased"),
        Chunk("b.pdf", 1, 2, "income of the deceased"),
    ]
    picked = service._select("Future prospects of the deceased?", chunks)
    assert [c.chunk_id for c in picked] == [1, 2]
