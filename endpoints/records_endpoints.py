# records_endpoints.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ptdb import (
    DocumentDB,
    InvalidPathError,
    InvalidValueError,
    NotArraySemanticsError,
    NotLoadedError,
    NotTraversableError,
    StoreError,
    WriteFailureError,
)
from ptdb.paths import ROOT

router = APIRouter(tags=["records"])
logger = logging.getLogger(__name__)

# First match wins.
ERROR_STATUS: list[tuple[type[StoreError], int]] = [
    (InvalidPathError, 400),
    (InvalidValueError, 400),
    (NotTraversableError, 409),
    (NotArraySemanticsError, 409),
    (NotLoadedError, 503),
    (WriteFailureError, 500),
]


class ValueBody(BaseModel):
    value: Any = None


def status_for(exc: StoreError) -> int:
    for kind, status in ERROR_STATUS:
        if isinstance(exc, kind):
            return status
    return 500


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.warning("RECORDS %s %s: %r", request.method, request.url.path, exc)
    return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status_code=status)


def _db(request: Request, op: str, path: str) -> DocumentDB:
    settings = request.app.state.settings
    if settings.debug_log_requests:
        logger.info("RECORDS %s: path=%s", op, path)
    return request.app.state.db


@router.get("/records")
async def read_root(request: Request) -> dict[str, Any]:
    return await read_record(ROOT, request)


@router.get("/records/{path}")
async def read_record(path: str, request: Request) -> dict[str, Any]:
    db = _db(request, "read", path)
    return {"path": path, "value": db.read(path)}


@router.put("/records/{path}")
async def write_record(path: str, body: ValueBody, request: Request) -> dict[str, Any]:
    db = _db(request, "write", path)
    return {"path": path, "value": await db.write(path, body.value)}


@router.delete("/records")
async def unset_root(request: Request) -> dict[str, Any]:
    return await unset_record(ROOT, request)


@router.delete("/records/{path}")
async def unset_record(path: str, request: Request) -> dict[str, Any]:
    db = _db(request, "unset", path)
    await db.unset(path)
    return {"path": path, "value": None}


@router.post("/records/{path}/push")
async def push_record(path: str, body: ValueBody, request: Request) -> dict[str, Any]:
    db = _db(request, "push", path)
    return {"path": path, "value": await db.push(path, body.value)}


@router.post("/records/{path}/unshift")
async def unshift_record(path: str, body: ValueBody, request: Request) -> dict[str, Any]:
    db = _db(request, "unshift", path)
    return {"path": path, "value": await db.unshift(path, body.value)}


@router.post("/records/{path}/pop")
async def pop_record(path: str, request: Request) -> dict[str, Any]:
    db = _db(request, "pop", path)
    return {"path": path, "value": await db.pop(path)}


@router.post("/records/{path}/shift")
async def shift_record(path: str, request: Request) -> dict[str, Any]:
    db = _db(request, "shift", path)
    return {"path": path, "value": await db.shift(path)}


@router.post("/save")
async def save(request: Request) -> dict[str, Any]:
    db = _db(request, "save", ROOT)
    return {"written": await db.save()}
