"""
Observability foundations shared by every router.

Contract locks:
- X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
- Error envelope keys: error, message, request_id, details
- Log lines are single JSON objects: ts, level, message, request_id, event, module
"""
from __future__ import annotations

import datetime
import json
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from castle_catalog.core.config import get_log_level
from castle_catalog.core.errors import CatalogError

_log = logging.getLogger("castle_catalog")
if not _log.handlers:
    logging.basicConfig(level=get_log_level())


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def emit(level: str, event: str, message: str, request_id: Optional[str], module: str, **extra: Any) -> None:
    payload: Dict[str, Any] = {
        "ts": _now_iso(),
        "level": level.lower(),
        "message": message,
        "request_id": request_id,
        "event": event,
        "module": module,
    }
    payload.update(extra)
    print(json.dumps(payload, ensure_ascii=False, default=str), flush=True)


def request_id_of(request: Optional[Request]) -> Optional[str]:
    return getattr(getattr(request, "state", None), "request_id", None)


def err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int) -> JSONResponse:
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": jsonable_encoder(details),
        },
        headers=headers,
    )


def _validation_message(errors: Any) -> str:
    if not errors:
        return "request validation failed"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p != "body"]
    field = ".".join(loc)
    msg = first.get("msg", "invalid value")
    return f"{field}: {msg}" if field else msg


async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp, 'status_code', None)}", rid, __name__)
    return resp


async def _catalog_exc_handler(request: Request, exc: CatalogError):
    rid = request_id_of(request)
    return err_envelope(exc.kind, exc.message, rid, exc.details, exc.status_code)


async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = request_id_of(request)
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        return err_envelope(
            str(detail["error"]),
            str(detail.get("message", "")),
            rid,
            detail.get("details", {"status_code": exc.status_code}),
            exc.status_code,
        )
    return err_envelope("http_error", str(detail), rid, {"status_code": exc.status_code}, exc.status_code)


async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = request_id_of(request)
    errors = exc.errors()
    return err_envelope("validation_error", _validation_message(errors), rid, errors, 400)


async def _unhandled_exc_handler(request: Request, exc: Exception):
    rid = request_id_of(request)
    emit("error", "http.request.unhandled", str(exc), rid, __name__, type=type(exc).__name__)
    return err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)


def install_observability(app: FastAPI) -> None:
    app.middleware("http")(_request_id_mw)
    app.add_exception_handler(CatalogError, _catalog_exc_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exc_handler)
    app.add_exception_handler(RequestValidationError, _validation_exc_handler)
    app.add_exception_handler(Exception, _unhandled_exc_handler)
