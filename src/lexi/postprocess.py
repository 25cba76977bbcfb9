from __future__ import annotations
import json
import re
from typing import Any, Dict

_JSON_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)

# short keys used by the chat front end's answer payload
_ANSWER_ALIASES = {"answer": "answer_text"}
_CITATION_ALIASES = {"text": "snippet_text", "source": "source_label", "link": "document_link"}

def extract_json_object(text: str) -> Dict[str, Any]:
    m = _JSON_BLOCK_RE.search(text)
    if not m:
        raise ValueError("No JSON object found in LLM output.")
    candidate = m.group(0)
    candidate = re.sub(r",\s*([}\]])", r"\1", candidate)
    return json.loads(candidate)

def _rename(obj: Dict[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
    out = dict(obj)
    for short, full in aliases.items():
        if short in out and full not in out:
            out[full] = out.pop(short)
    return out

def coerce_answer_fields(obj: Dict[str, Any]) -> Dict[str, Any]:
    obj = _rename(obj, _ANSWER_ALIASES)
    citations = obj.get("citations") or []
    obj["citations"] = [_rename(c, _CITATION_ALIASES) for c in citations if isinstance(c, dict)]
    return obj
