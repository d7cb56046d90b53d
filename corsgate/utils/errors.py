from fastapi import Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from corsgate.utils.logging import logger

def error_body(error) -> dict:
    return {"ok": False, "error": error}

# ---- Exception handlers (register these in main.py) ----
# Keyed on Starlette's HTTPException so routing 404/405s get the same envelope
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTPException {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )

async def handle_unhandled(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {type(exc).__name__}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("internal_error"),
    )
