"""Exception handlers mapping domain errors onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from cafe.domain import logger
from cafe.errors import CafeError


async def cafe_error_handler(request: Request, exc: CafeError) -> JSONResponse:
    logger.warning(
        "request_rejected",
        kind=exc.kind,
        message=exc.message,
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers plus the handler for ``CafeError``."""
    register_exception_handlers(app)
    app.add_exception_handler(CafeError, cafe_error_handler)
