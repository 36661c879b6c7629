"""
role_hierarchy.api.errors

Exception handlers translating domain errors into HTTP responses.

Responsibilities:
- Map each `ErrorKind` onto its status code.
- Render every failure as `{"message", "kind"}` (plus `childRoleIds` on conflicts).
- Hide backing-store details behind a generic message.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from role_hierarchy.errors import ConflictError, DirectoryError, ErrorKind, StorageError
from role_hierarchy.observability.logging import get_logger

log = get_logger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.validation: status.HTTP_400_BAD_REQUEST,
    ErrorKind.authentication: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.authorization: status.HTTP_403_FORBIDDEN,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.protected_entity: status.HTTP_403_FORBIDDEN,
    ErrorKind.storage: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_body(kind: ErrorKind, message: str) -> dict[str, object]:
    return {"message": message, "kind": str(kind)}


async def _directory_error(request: Request, exc: DirectoryError) -> JSONResponse:
    code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, StorageError):
        log.error("request.storage_error", error=exc.message)
        return JSONResponse(
            status_code=code, content=error_body(exc.kind, "Internal server error")
        )

    body = error_body(exc.kind, exc.message)
    if isinstance(exc, ConflictError):
        body["childRoleIds"] = list(exc.child_role_ids)
    return JSONResponse(status_code=code, content=body)


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    if where:
        message = f"{where}: {message}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ErrorKind.validation, message),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DirectoryError, _directory_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)


# --- Module Notes -----------------------------------------------------------
# `IdentityStoreDegraded` is not raised; the users router renders it as a 207.
