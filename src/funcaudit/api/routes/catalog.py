"""Catalog endpoints: listing, statistics, import and deletion."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from pydantic import BaseModel

from funcaudit.api.deps import get_workspace
from funcaudit.audit.workspace import AuditWorkspace
from funcaudit.models.catalog import CatalogStats

router = APIRouter(tags=["catalog"])


class UrlImport(BaseModel):
    url: str


def _dump(entries) -> list[dict[str, Any]]:
    return [e.model_dump(by_alias=True) for e in entries]


@router.get("")
def list_functions(
    search: str = "",
    workspace: AuditWorkspace = Depends(get_workspace),
) -> list[dict[str, Any]]:
    """Catalog entries, optionally filtered by app, function or example query."""
    return _dump(workspace.search(search))


@router.get("/stats")
def catalog_stats(workspace: AuditWorkspace = Depends(get_workspace)) -> CatalogStats:
    return workspace.stats()


@router.post("", status_code=201)
def add_functions(
    records: list[dict[str, Any]] = Body(...),
    workspace: AuditWorkspace = Depends(get_workspace),
) -> list[dict[str, Any]]:
    """Normalize raw records (any supported header spelling) and append them."""
    return _dump(workspace.import_records(records))


@router.post("/import", status_code=201)
async def import_file(
    request: Request,
    filename: str = Query(..., description="Original file name; the extension selects the parser"),
    workspace: AuditWorkspace = Depends(get_workspace),
) -> dict[str, Any]:
    data = await request.body()
    added = workspace.import_document(data, filename)
    return {"imported": len(added), "functions": _dump(added)}


@router.post("/import-url", status_code=201)
def import_url(body: UrlImport, workspace: AuditWorkspace = Depends(get_workspace)) -> dict[str, Any]:
    added = workspace.import_url(body.url)
    return {"imported": len(added), "functions": _dump(added)}


@router.delete("/{function_id}")
def delete_function(function_id: str, workspace: AuditWorkspace = Depends(get_workspace)) -> dict[str, Any]:
    return workspace.delete_function(function_id).model_dump(by_alias=True)
