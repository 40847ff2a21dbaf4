"""Audit endpoints: single classification, history, batch runs and export."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel

from funcaudit.api.deps import get_workspace
from funcaudit.audit.report import format_report, write_report_xlsx
from funcaudit.audit.workspace import AuditWorkspace
from funcaudit.ingestion.file_parser import load_query_document
from funcaudit.models.batch import BatchItem, BatchRunSummary
from funcaudit.models.report import REPORT_FILE_NAME

router = APIRouter(tags=["audit"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ClassifyRequest(BaseModel):
    query: str


class ExportItem(BaseModel):
    query: str
    result: Optional[dict[str, Any]] = None


def _summary_payload(summary: BatchRunSummary) -> dict[str, Any]:
    return {
        "progress": summary.progress,
        "completed": summary.completed_count,
        "failed": summary.error_count,
        "cancelled": summary.cancelled,
        "items": [i.model_dump(mode="json", by_alias=True) for i in summary.items],
        "records": [r.model_dump(mode="json", by_alias=True) for r in summary.records],
    }


@router.post("/classify")
def classify(body: ClassifyRequest, workspace: AuditWorkspace = Depends(get_workspace)) -> dict[str, Any]:
    record, _ = workspace.classify(body.query)
    return record.model_dump(mode="json", by_alias=True)


@router.get("/history")
def history(
    recent_hours: Optional[float] = Query(None, gt=0),
    workspace: AuditWorkspace = Depends(get_workspace),
) -> list[dict[str, Any]]:
    records = workspace.recent_history(recent_hours) if recent_hours else workspace.history
    return [r.model_dump(mode="json", by_alias=True) for r in records]


@router.delete("/history", status_code=204)
def clear_history(workspace: AuditWorkspace = Depends(get_workspace)) -> Response:
    workspace.clear_history()
    return Response(status_code=204)


@router.post("/batch")
def run_batch(
    queries: list[str] = Body(...),
    workspace: AuditWorkspace = Depends(get_workspace),
) -> dict[str, Any]:
    return _summary_payload(workspace.run_batch(q for q in queries if q.strip()))


@router.post("/batch/import")
async def run_batch_file(
    request: Request,
    filename: str = Query(...),
    workspace: AuditWorkspace = Depends(get_workspace),
) -> dict[str, Any]:
    queries = load_query_document(await request.body(), filename)
    summary = await run_in_threadpool(workspace.run_batch, queries)
    return _summary_payload(summary)


@router.post("/batch/export")
def export_batch(items: list[ExportItem] = Body(...)) -> Response:
    batch_items = [BatchItem.model_validate(i.model_dump()) for i in items]
    data = write_report_xlsx(format_report(batch_items))
    return Response(
        content=data,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{REPORT_FILE_NAME}"'},
    )
