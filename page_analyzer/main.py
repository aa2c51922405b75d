"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
import os
import time
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Response, status

from .analyzer import analyze
from .db import init_db
from .logging_setup import configure_logging
from .models import AnalysisRecord
from .schemas import AnalysisRecordOut, AnalysisRecordUpdate, AnalyzeRequest
from .scrape import FetchFailed
from .store import RecordInvalid, RecordNotFound, ResultStore, get_store

LOG_FILE_PATH = configure_logging(os.getenv("LOG_LEVEL"))
logger = logging.getLogger(__name__)
logger.info("Logging configured. File output: %s", LOG_FILE_PATH)

app = FastAPI(title="Page Analyzer")


def to_response(record: AnalysisRecord) -> AnalysisRecordOut:
    return AnalysisRecordOut(
        id=str(record.id),
        url=record.url,
        page_title=record.page_title,
        html_version=record.html_version,
        heading_counts=dict(record.heading_counts or {}),
        external_link_count=record.external_link_count,
        internal_link_count=record.internal_link_count,
        inaccessible_link_count=record.inaccessible_link_count,
        is_login=record.is_login,
    )


@app.on_event("startup")
def on_startup() -> None:
    start = time.perf_counter()
    logger.info("Starting application initialisation")
    init_db()
    logger.info("Database initialised in %.2fs", time.perf_counter() - start)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/response", response_model=List[AnalysisRecordOut])
def list_responses(store: ResultStore = Depends(get_store)) -> List[AnalysisRecordOut]:
    return [to_response(record) for record in store.list_records()]


@app.get("/api/response/{record_id}", response_model=AnalysisRecordOut)
def get_response(record_id: int, store: ResultStore = Depends(get_store)) -> AnalysisRecordOut:
    try:
        return to_response(store.get(record_id))
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/api/response", response_model=AnalysisRecordOut, status_code=status.HTTP_201_CREATED)
def create_response(payload: AnalyzeRequest, store: ResultStore = Depends(get_store)) -> AnalysisRecordOut:
    try:
        result = analyze(payload.url)
    except FetchFailed as exc:
        logger.warning("Analysis of %s aborted: %s", payload.url, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return to_response(store.add(result))


@app.put("/api/response/{record_id}", response_model=AnalysisRecordOut)
def update_response(
    record_id: int,
    payload: AnalysisRecordUpdate,
    store: ResultStore = Depends(get_store),
) -> AnalysisRecordOut:
    try:
        record = store.update(record_id, payload.changes())
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RecordInvalid as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return to_response(record)


@app.delete("/api/response/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_response(record_id: int, store: ResultStore = Depends(get_store)) -> Response:
    try:
        store.delete(record_id)
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
