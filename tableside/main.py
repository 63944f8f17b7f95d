"""FastAPI entrypoint for the public table-ordering API."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tableside.api.v1.api import api_router
from tableside.core.config import settings
from tableside.db.base import Base
from tableside.db import session as db_session
from tableside.db.seed import ensure_demo_data

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix=settings.api_prefix)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render errors as `{message, reason?}` so clients read one shape."""
    body: dict[str, Any]
    if isinstance(exc.detail, dict):
        body = {key: value for key, value in exc.detail.items() if value is not None}
    else:
        body = {"message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first_error = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first_error.get("loc", ()) if part != "body")
    message = f"Invalid request: {location} {first_error.get('msg', '')}".strip()
    return JSONResponse(status_code=422, content={"message": message})


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=db_session.engine)
    if not settings.seed_demo_data:
        return
    with db_session.SessionLocal() as session:
        try:
            created = ensure_demo_data(session)
            logger.info("[BOOTSTRAP] demo data %s", "created" if created else "already present")
        except Exception:
            logger.exception("[BOOTSTRAP] Demo seed failed; continuing startup.")
