import uuid
from typing import Optional

import socketio
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from corsgate.config import Settings, settings as default_settings, split_csv
from corsgate.cors.middleware import OriginPolicyCORSMiddleware
from corsgate.cors.policy import PolicyConfig, PolicyEngine
from corsgate.realtime.server import create_sio
from corsgate.utils.logging import logger, request_id_ctx
from corsgate.utils.errors import (
    handle_http_exception,
    handle_unhandled,
)

def create_app(settings: Optional[Settings] = None, engine: Optional[PolicyEngine] = None) -> FastAPI:
    settings = settings or default_settings
    logger.setLevel(settings.LOG_LEVEL)
    engine = engine or PolicyEngine(PolicyConfig.from_settings(settings))

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.origin_engine = engine

    # ----- Middleware -----
    app.add_middleware(
        OriginPolicyCORSMiddleware,
        engine=engine,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=split_csv(settings.CORS_ALLOW_METHODS),
        allow_headers=split_csv(settings.CORS_ALLOW_HEADERS),
        expose_headers=split_csv(settings.CORS_EXPOSE_HEADERS),
        max_age=settings.CORS_MAX_AGE,
        preflight_status=settings.CORS_PREFLIGHT_STATUS,
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        token = request_id_ctx.set(str(uuid.uuid4())[:8])
        try:
            response = await call_next(request)
            response.headers["X-Request-Id"] = request_id_ctx.get() or "-"
        finally:
            request_id_ctx.reset(token)
        return response

    # ----- Exception Handlers -----
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled)

    # ----- Health -----
    @app.get("/healthz", tags=["system"])
    async def healthz():
        return {
            "status": "ok",
            "app": settings.APP_NAME,
            "env": settings.APP_ENV,
            "version": app.version,
            "origins": {
                "rules": len(engine.config.rules),
                "production": engine.config.is_production,
            },
        }

    return app

def create_asgi_app(settings: Optional[Settings] = None) -> socketio.ASGIApp:
    """HTTP app and Socket.IO server sharing one origin policy."""
    settings = settings or default_settings
    engine = PolicyEngine(PolicyConfig.from_settings(settings))
    app = create_app(settings, engine=engine)
    sio = create_sio(engine, cors_credentials=settings.CORS_ALLOW_CREDENTIALS)
    app.state.sio = sio
    logger.info(f"{settings.APP_NAME} ready ({'prod' if settings.is_production else 'dev'})")
    return socketio.ASGIApp(sio, other_asgi_app=app, socketio_path=settings.SOCKET_PATH.strip("/"))

app = create_asgi_app()
