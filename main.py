from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from phrasedeck.db import init_db
from phrasedeck.errors import (
    InvalidCredentials,
    PhraseDeckError,
    PreconditionFailed,
    Unauthenticated,
    UserAlreadyExists,
)
from phrasedeck.routes import audio, auth, translate, user, vocabulary
from phrasedeck.settings import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (Unauthenticated, 401),
    (InvalidCredentials, 401),
    (UserAlreadyExists, 409),
    (PreconditionFailed, 400),
]


def status_for(exc: PhraseDeckError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    yield


app = FastAPI(title="PhraseDeck", version="0.1.0", lifespan=lifespan)

app.include_router(auth.router)
app.include_router(user.router)
app.include_router(vocabulary.router)
app.include_router(audio.router)
app.include_router(translate.router)


@app.exception_handler(PhraseDeckError)
async def handle_phrasedeck_error(request: Request, exc: PhraseDeckError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"error": exc.detail})


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal error"})


@app.get("/", include_in_schema=False)
def read_index() -> dict:
    return {"status": "ok"}
