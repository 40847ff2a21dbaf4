"""funcaudit exception hierarchy."""

from __future__ import annotations


class FuncAuditError(Exception):
    """Base exception for all funcaudit errors."""


class ParseError(FuncAuditError):
    """Raw input could not be parsed as its declared format."""

    def __init__(self, message: str, source: str = "") -> None:
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class ClassifierError(FuncAuditError):
    """The classifier call failed or returned a schema-invalid payload."""

    def __init__(self, message: str, query: str = "") -> None:
        self.query = query
        super().__init__(f"Classification of {query!r} failed: {message}" if query else message)


class ModelProviderError(FuncAuditError):
    """The underlying LLM provider call failed."""


class EmptyQueryError(FuncAuditError, ValueError):
    """A blank query was submitted for classification."""


class StoreError(FuncAuditError):
    """Blob store operation failed or persisted state is unreadable."""


class CatalogError(FuncAuditError):
    """Invalid operation on the function catalog."""


class FunctionNotFoundError(CatalogError):
    """No catalog entry with the given id."""

    def __init__(self, function_id: str) -> None:
        self.function_id = function_id
        super().__init__(f"Function {function_id!r} not found in catalog")


class DuplicateFunctionError(CatalogError):
    """A catalog entry with the same id already exists."""

    def __init__(self, function_ids: list[str]) -> None:
        self.function_ids = function_ids
        super().__init__(f"Duplicate function ids: {', '.join(function_ids)}")


class BatchError(FuncAuditError):
    """Error in the batch runner itself (not in a single item)."""


class BatchAlreadyRunningError(BatchError):
    """A batch run was started while another is still in progress."""


class InvalidTransitionError(BatchError):
    """A batch item was moved to a status its lifecycle does not allow."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move batch item from {current} to {target}")
