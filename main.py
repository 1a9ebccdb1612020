from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.db.base import dispose_engine, init_models
from app.core.logging import get_logger, setup_logging
from app.apis.auth.main import router as auth_router
from app.apis.decks.main import router as decks_router
from app.modules.decks.oracle import TextOracle

import uvicorn
from fastapi.middleware.cors import CORSMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    app.state.oracle = TextOracle()
    logger.info(f"Oracle ready ({settings.oracle.model_provider})")
    try:
        yield
    finally:
        app.state.oracle = None
        await dispose_engine()


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(decks_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        logger.error(f"An error occurred when starting the server: {e}.")
