"""Error envelope for registry failures.

Domain errors are reported as

    {"error": {"code": "SoulDoesNotExist", "message": "..."}}

so the SDK can re-raise the same exception class. Input validation failures
stay plain `HTTPException(400)` with a `detail` string.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.errors import SoulboundsError

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[str, int] = {
    "IdentityIsNotUnique": 409,
    "AccountAlreadyHasSoul": 409,
    "SoulDoesNotExist": 404,
    "MetadataKeyNotAllowed": 403,
    "MetaKeyNotFound": 404,
    "NotAuthorized": 401,
}


async def soulbounds_error_handler(request: Request, exc: SoulboundsError) -> JSONResponse:
    status = STATUS_BY_CODE.get(exc.code, 400)
    logger.debug("%s %s -> %d %s", request.method, request.url.path, status, exc.code)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content={"error": {"code": exc.code, "message": exc.message}},
        headers=headers,
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SoulboundsError, soulbounds_error_handler)  # type: ignore[arg-type]
