"""ASGI entry point: `uvicorn app.main:app`.

create_app() reads settings when called, so tests can set DATABASE_URL
before the app is built.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.v1 import api_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.core.limiter import limiter
from app.middleware import ActorContextMiddleware, RequestIDMiddleware


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    # Starlette wraps in reverse: the last one added sees the request first.
    origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        ActorContextMiddleware,
        id_header=settings.actor_id_header,
        name_header=settings.actor_name_header,
        roles_header=settings.actor_roles_header,
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)
    _install_middleware(app, settings)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
