from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

@dataclass(frozen=True)
class GoldenCase:
    doc_path: str
    citation: str
    expected_page: Optional[int]

@dataclass(frozen=True)
class CaseResult:
    doc_path: str
    citation: str
    expected_page: Optional[int]
    actual_page: Optional[int]
    passed: bool

def load_golden(path: Path) -> List[GoldenCase]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return [GoldenCase(doc_path=r["doc_path"], citation=r["citation"], expected_page=r.get("expected_page")) for r in raw]

def run_eval(locate_fn: Callable[[Path, str], Optional[int]], cases: List[GoldenCase]) -> List[CaseResult]:
    """`locate_fn` returns the located page, or None when the citation is not found."""
    results: List[CaseResult] = []
    for c in cases:
        actual = locate_fn(Path(c.doc_path), c.citation)
        results.append(CaseResult(
            doc_path=c.doc_path,
            citation=c.citation,
            expected_page=c.expected_page,
            actual_page=actual,
            passed=actual == c.expected_page,
        ))
    return results
