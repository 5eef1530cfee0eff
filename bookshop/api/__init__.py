# bookshop/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bookshop.api.routers import auth, books, carts, categories, health
from bookshop.data.database import init_db
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database")
    init_db()
    logger.info("Database tables ready")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Book Shop API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(books.router)
    app.include_router(categories.router)
    app.include_router(carts.router)

    return app
