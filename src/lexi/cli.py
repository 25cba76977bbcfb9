from __future__ import annotations
from pathlib import Path
from typing import Optional
import asyncio
import sys
import typer
import uvicorn
from rich import print

from lexi.answer import build_answer_service, check_question
from lexi.citations import resolve_document_link, strip_para_reference
from lexi.config import get_settings
from lexi.errors import PageError, ParseError
from lexi.eval import load_golden, run_eval
from lexi.locator import locate as locate_citation
from lexi.logging import configure_logging
from lexi.pdf import extract_page_text, open_document
from lexi.viewer import ViewerController, ViewerStatus

app = typer.Typer(add_completion=False)

def _locate_page(path: Path, citation: str) -> Optional[int]:
    try:
        doc = open_document(path)
    except ParseError:
        return None
    return locate_citation(doc, strip_para_reference(citation)).page

@app.command()
def locate(pdf: str, citation: str, keep_para_reference: bool = typer.Option(False, "--keep-para-reference")):
    configure_logging(stream=sys.stderr)
    text = citation if keep_para_reference else strip_para_reference(citation)
    try:
        doc = open_document(Path(pdf))
    except ParseError as e:
        print(f"[red]Document unusable[/red]: {e}")
        raise typer.Exit(code=1)
    res = locate_citation(doc, text)
    if res.found:
        print(f"[green]Found[/green] on page {res.page} of {doc.page_count}")
    else:
        print(f"[yellow]Not found[/yellow] ({doc.page_count} pages scanned)")

@app.command()
def ask(question: str):
    s = get_settings()
    configure_logging(stream=sys.stderr)
    try:
        question = check_question(question)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    service = build_answer_service(s)
    answer = asyncio.run(service.answer(question))

    print("[bold]Answer:[/bold]")
    print(answer.answer_text)
    for c in answer.citations:
        print(f"\n[italic]{c.snippet_text}[/italic]")
        if not c.document_link:
            print(f"Source: {c.source_label}")
            continue
        try:
            path = resolve_document_link(c.document_link, s.docs_dir)
        except (FileNotFoundError, ValueError):
            print(f"Source: {c.source_label} [red](document not available)[/red]")
            continue
        page = _locate_page(path, c.snippet_text)
        where = f"page {page}" if page else "page not located"
        print(f"Source: {c.source_label} ({where})")

def _render(viewer: ViewerController) -> None:
    mark = " [yellow]\\[highlighted][/yellow]" if viewer.is_highlighted() else ""
    print(f"\n[bold]Page {viewer.current_page} of {viewer.page_count}[/bold]{mark}")
    try:
        text = extract_page_text(viewer.document, viewer.current_page)
    except PageError:
        text = "(page text unavailable)"
    print(text[:800])

@app.command()
def view(pdf: str, citation: str):
    configure_logging(stream=sys.stderr)
    viewer = ViewerController()
    asyncio.run(viewer.open(Path(pdf), strip_para_reference(citation)))
    if viewer.status == ViewerStatus.UNUSABLE:
        print("[red]Document unusable[/red]")
        raise typer.Exit(code=1)
    if viewer.page_count == 0:
        print("Document has no pages")
        return
    if viewer.highlighted_page is None:
        print("[yellow]Citation not found; showing page 1[/yellow]")

    while True:
        _render(viewer)
        cmd = typer.prompt("[n]ext, [p]revious, [q]uit", default="n").strip().lower()
        if cmd.startswith("q"):
            viewer.close()
            break
        if cmd.startswith("p"):
            viewer.previous_page()
        else:
            viewer.next_page()

@app.command()
def eval(golden_path: str = "eval/golden.json"):
    configure_logging(stream=sys.stderr)
    cases = load_golden(Path(golden_path))
    results = run_eval(_locate_page, cases)
    passed = sum(1 for r in results if r.passed)
    print(f"[bold]{passed}/{len(results)}[/bold] cases passed")
    for r in results:
        status = "[green]PASS[/green]" if r.passed else "[red]FAIL[/red]"
        print(f"{status} {r.doc_path} expected={r.expected_page} actual={r.actual_page}")

@app.command()
def serve(host: str = "127.0.0.1", port: int = 8000):
    uvicorn.run("lexi.api:app", host=host, port=port)

if __name__ == "__main__":
    app()
