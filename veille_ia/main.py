from __future__ import annotations

import time
import uuid
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from veille_ia.api.router import api_router
from veille_ia.core.settings import settings
from veille_ia.core.logging import setup_logging
from veille_ia.core.errors import error_payload, AppHTTPException
from veille_ia.core.request_id import set_request_id, get_request_id, ensure_request_id
from veille_ia.core.rate_limit import rate_limiter

"""
Application FastAPI (entrypoint).

Rôle (fonctionnel) :
- Configure l’application (settings, CORS, middlewares, routers).
- Centralise l’observabilité :
  - request_id propagé (X-Request-Id)
  - logs structurés JSON (timing, status, client_ip)
  - seuil de “slow request”
- Applique un rate-limit optionnel sur la génération IA.
- Uniformise les erreurs côté client ({error, code, message?, request_id}).

Ce fichier ne contient pas de logique métier :
- La logique métier est dans veille_ia.services
- Les routes sont dans veille_ia.api
- Les composants transverses sont dans veille_ia.core
"""

# Chemins soumis au rate limit (appel OpenAI)
RATE_LIMITED_PATHS = ("/generate-veille",)


class UTF8JSONResponse(JSONResponse):
    """Réponse JSON avec charset UTF-8 explicite (rapports en français)."""
    media_type = "application/json; charset=utf-8"


setup_logging(settings.LOG_LEVEL)

log = logging.getLogger("veille_ia")
http_log = logging.getLogger("veille_ia.http")

SLOW_MS = int(settings.SLOW_REQUEST_MS)


def _split_origins(value: str) -> list[str]:
    """Parse une liste d’origines CORS depuis une string 'a,b,c'."""
    if not value:
        return []
    return [o.strip() for o in value.split(",") if o.strip()]


def _rid(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id() or str(uuid.uuid4())


def _app_error_response(request: Request, exc: StarletteHTTPException) -> UTF8JSONResponse:
    detail = exc.detail if isinstance(exc.detail, dict) else {}
    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_payload(
            code=str(detail.get("code") or "HTTP_ERROR"),
            error=str(detail.get("error") or "HTTP error"),
            message=detail.get("message"),
            details=detail.get("details"),
            request_id=_rid(request),
        ),
    )


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    default_response_class=UTF8JSONResponse,
)

origins = _split_origins(settings.CORS_ORIGINS)

default_dev_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or default_dev_origins,
    allow_credentials=False,  # auth par header bearer, pas de cookies
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-Request-Id",
    ],
)

app.include_router(api_router)


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """
    Rate-limit (optionnel) :
    - Ne bloque jamais les préflights CORS (OPTIONS).
    - S’applique uniquement à la génération IA.
    """
    if request.method == "OPTIONS":
        return await call_next(request)

    if request.url.path.startswith(RATE_LIMITED_PATHS):
        try:
            rate_limiter.check(request)
        except AppHTTPException as exc:
            return _app_error_response(request, exc)

    return await call_next(request)


@app.middleware("http")
async def request_observability(request: Request, call_next):
    rid = ensure_request_id(request.headers.get("X-Request-Id"))
    request.state.request_id = rid

    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        duration_ms = int((time.perf_counter() - start) * 1000)

        if response is not None:
            response.headers["X-Request-Id"] = rid

        level = logging.WARNING if duration_ms >= SLOW_MS else logging.INFO
        http_log.log(
            level,
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": getattr(response, "status_code", None),
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
            },
        )

        set_request_id(None)


@app.exception_handler(AppHTTPException)
async def app_http_exception_handler(request: Request, exc: AppHTTPException):
    """Erreurs applicatives (AppHTTPException) -> payload standard."""
    return _app_error_response(request, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Erreurs HTTP natives (404, 405, etc.) -> payload standard."""
    if isinstance(exc.detail, dict):
        return _app_error_response(request, exc)

    code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_payload(code=code, error=str(exc.detail), request_id=_rid(request)),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Corps / paramètres illisibles -> 400 VALIDATION_ERROR + details."""
    return UTF8JSONResponse(
        status_code=400,
        content=error_payload(
            code="VALIDATION_ERROR",
            error="Invalid request",
            request_id=_rid(request),
            details=jsonable_encoder(exc.errors()),
        ),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Fallback : toute exception non gérée -> 500 + message d’origine + log serveur."""
    log.exception("Unhandled error: %s", exc)

    return UTF8JSONResponse(
        status_code=500,
        content=error_payload(
            code="INTERNAL_ERROR",
            error=f"Internal server error: {exc}",
            request_id=_rid(request),
        ),
    )
