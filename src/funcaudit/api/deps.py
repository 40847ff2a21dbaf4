"""Request-scoped accessors for application state."""

from __future__ import annotations

from fastapi import Request

from funcaudit.audit.workspace import AuditWorkspace


def get_workspace(request: Request) -> AuditWorkspace:
    return request.app.state.workspace
