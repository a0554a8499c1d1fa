"""FastAPI application: error translation, health check, template catalogue and routers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sop_studio import __version__
from sop_studio.api import exports, personas, sops
from sop_studio.config.prompts import INDUSTRY_TEMPLATES, LANGUAGE_CONFIGS, TONE_TEMPLATES
from sop_studio.errors import NotFoundError, SOPStudioError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error(422, "Invalid request", details=jsonable_encoder(exc.errors()))

    @app.exception_handler(NotFoundError)
    async def _not_found_handler(request: Request, exc: NotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(ValueError)
    async def _value_error_handler(request: Request, exc: ValueError):
        return _error(400, str(exc))

    @app.exception_handler(SOPStudioError)
    async def _app_error_handler(request: Request, exc: SOPStudioError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return _error(500, str(exc))


def template_catalogue() -> dict:
    return {
        "industries": [
            {"key": key, "name": tpl.name, "frameworks": list(tpl.frameworks)}
            for key, tpl in INDUSTRY_TEMPLATES.items()
        ],
        "tones": [
            {"key": key, "name": tpl.name, "description": tpl.description}
            for key, tpl in TONE_TEMPLATES.items()
        ],
        "languages": [
            {"code": cfg.code, "name": cfg.name, "nativeName": cfg.native_name, "flag": cfg.flag}
            for cfg in LANGUAGE_CONFIGS.values()
        ],
    }


def create_app() -> FastAPI:
    app = FastAPI(title="SOP Studio", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/api/health")
    def health():
        return {"status": "healthy"}

    @app.get("/api/templates")
    def templates():
        return template_catalogue()

    app.include_router(sops.router)
    app.include_router(personas.router)
    app.include_router(exports.router)
    return app


app = create_app()
