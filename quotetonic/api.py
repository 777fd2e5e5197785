"""FastAPI application exposing the local quote workspace."""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .config import load_config
from .exceptions import ExportError, QuoteNotFoundError, QuoteTonicError
from .export import QuotePdfRenderer
from .logging_setup import configure_logging
from .pricing import compute_totals
from .schemas import (
    AppSettings,
    CreateQuoteRequest,
    LineItem,
    Quote,
    QuoteStatus,
    QuoteTotals,
    StatusCounts,
    StatusUpdate,
    ValidationResponse,
)
from .workspace import Workspace

app = FastAPI(title="QuoteTonic", version="0.1.0")

# Browser front-ends on localhost call this API directly
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_workspace() -> Workspace:
    config = load_config()
    configure_logging(config.log_level, config.log_file)
    return Workspace(config)


def _get_quote(ws: Workspace, quote_id: str) -> Quote:
    try:
        return ws.quote_store.get_quote(quote_id)
    except QuoteNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/totals", response_model=QuoteTotals)
def totals(items: List[LineItem]):
    return compute_totals(items)


@app.get("/quotes", response_model=List[Quote])
def list_quotes(
    search: str = "",
    status: Optional[QuoteStatus] = None,
    ws: Workspace = Depends(get_workspace),
):
    return ws.quote_store.filter_quotes(search, status)


@app.post("/quotes", response_model=Quote, status_code=201)
def create_quote(request: CreateQuoteRequest, ws: Workspace = Depends(get_workspace)):
    try:
        ws.create_quote(request.template_id)
    except QuoteTonicError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    if request.client_name is not None:
        ws.editor.set_client(name=request.client_name)
    return ws.save_editor()


@app.get("/quotes/{quote_id}", response_model=Quote)
def get_quote(quote_id: str, ws: Workspace = Depends(get_workspace)):
    return _get_quote(ws, quote_id)


@app.put("/quotes/{quote_id}", response_model=Quote)
def save_quote(quote_id: str, quote: Quote, ws: Workspace = Depends(get_workspace)):
    if quote.id != quote_id:
        raise HTTPException(status_code=422, detail="Quote id in body does not match the URL")
    return ws.save_quote(quote)


@app.get("/quotes/{quote_id}/totals", response_model=QuoteTotals)
def quote_totals(quote_id: str, ws: Workspace = Depends(get_workspace)):
    return compute_totals(_get_quote(ws, quote_id).items)


@app.post("/quotes/{quote_id}/duplicate", response_model=Quote, status_code=201)
def duplicate_quote(quote_id: str, ws: Workspace = Depends(get_workspace)):
    _get_quote(ws, quote_id)
    return ws.duplicate_quote(quote_id)


@app.patch("/quotes/{quote_id}/status", response_model=Quote)
def update_status(quote_id: str, update: StatusUpdate, ws: Workspace = Depends(get_workspace)):
    _get_quote(ws, quote_id)
    return ws.update_status(quote_id, update.status)


@app.delete("/quotes/{quote_id}", status_code=204)
def delete_quote(quote_id: str, confirm: bool = Query(False), ws: Workspace = Depends(get_workspace)):
    _get_quote(ws, quote_id)
    if not ws.delete_quote(quote_id, lambda _message: confirm):
        raise HTTPException(status_code=409, detail=ws.strings["deleteConfirm"])
    return Response(status_code=204)


@app.get("/quotes/{quote_id}/pdf")
def quote_pdf(quote_id: str, ws: Workspace = Depends(get_workspace)):
    quote = _get_quote(ws, quote_id)
    try:
        data = QuotePdfRenderer(ws.settings).render(quote)
    except ExportError as exc:
        raise HTTPException(status_code=500, detail=exc.message) from exc
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{quote.number}.pdf"'},
    )


@app.post("/validate", response_model=ValidationResponse)
def validate_quotes(quotes: List[Quote], ws: Workspace = Depends(get_workspace)):
    return ws.validate(quotes)


@app.get("/settings", response_model=AppSettings)
def get_settings(ws: Workspace = Depends(get_workspace)):
    return ws.settings


@app.get("/stats", response_model=StatusCounts)
def stats(ws: Workspace = Depends(get_workspace)):
    return ws.quote_store.status_counts()
