import time
import uuid

from app.core.errors import ExamStrategistError
from app.utils.logger import logger, log_api_request, log_error_with_trace
from fastapi import Request
from fastapi.responses import JSONResponse


def error_payload(request: Request, error: str, message: str) -> dict:
    return {
        "error": error,
        "message": message,
        "request_id": getattr(request.state, "req_id", None),
    }


async def exam_error_handler(request: Request, exc: ExamStrategistError):
    """Every pipeline error becomes a JSON error response; none is fatal."""
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(request, type(exc).__name__, exc.message),
    )


async def exception_middleware(request: Request, call_next):
    req_id = str(uuid.uuid4())
    start = time.time()
    request.state.req_id = req_id

    method = request.method
    path = request.url.path
    query_params = dict(request.query_params)
    client = request.client.host if request.client else None

    logger.info(
        f"INCOMING REQUEST: {method} {path}",
        extra={
            "request_id": req_id,
            "query_params": query_params,
            "client": client,
        }
    )

    status_code = 500
    error = None

    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception as exc:
        error = str(exc)
        log_error_with_trace(
            operation=f"{method} {path}",
            error=exc,
            metadata={"request_id": req_id, "query_params": query_params},
        )
        response = JSONResponse(
            status_code=500,
            content=error_payload(request, "Internal server error", str(exc)),
        )
        status_code = 500
    finally:
        duration_ms = (time.time() - start) * 1000
        log_api_request(
            request_id=req_id,
            method=method,
            path=path,
            status_code=status_code,
            latency_ms=duration_ms,
            error=error,
            metadata={
                "query_params": query_params,
                "client": client,
                "content_type": request.headers.get("content-type"),
            }
        )
        logger.info(
            f"REQUEST COMPLETED: {method} {path} - {status_code} ({duration_ms:.0f}ms)",
            extra={
                "request_id": req_id,
                "duration_ms": duration_ms,
                "status_code": status_code,
            }
        )

    return response
