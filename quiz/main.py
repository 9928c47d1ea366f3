from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.auth import build_auth_middleware
from shared.config import Settings, load_settings
from shared.database import Base, make_engine, make_session_factory
import shared.models  # noqa: F401  registers app_user on Base.metadata
from . import models  # noqa: F401
from .routes import build_router

logger = logging.getLogger("quiz-service")


def create_app(settings: Settings | None = None, *, SessionLocal=None, enable_auth: bool = True) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    if SessionLocal is None:
        engine = make_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        SessionLocal = make_session_factory(engine)

    app = FastAPI(title="Quiz Service", version="1.0.0")

    if enable_auth:
        app.middleware("http")(build_auth_middleware(settings.auth_service_url))

    # Browsers reject "*" with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    def health_check():
        return {"status": "healthy", "service": "quiz-service"}

    app.include_router(build_router(SessionLocal), prefix="/tests", tags=["Tests"])

    logger.info("Quiz service ready (auth=%s)", "on" if enable_auth else "off")
    return app


def run() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
