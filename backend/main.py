from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.db import init_db
from backend.routers.auth_router import auth_router
from backend.routers.budgets_router import budgets_router
from backend.routers.categories_router import categories_router
from backend.routers.transactions_router import transactions_router
from backend.utils.circuit_breaker import CircuitBreaker, CircuitBreakerMiddleware
from backend.utils.config import CORS_ORIGINS
from backend.utils.error_handlers import register_exception_handlers
from backend.utils.logger import get_logger

logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Starting Finance Tracker API")
    yield
    logger.info("Finance Tracker API stopped")


def create_app(breaker: CircuitBreaker = None) -> FastAPI:
    app = FastAPI(title="Finance Tracker API", lifespan=lifespan)

    app.add_middleware(CircuitBreakerMiddleware, breaker=breaker or CircuitBreaker())
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(transactions_router)
    app.include_router(categories_router)
    app.include_router(budgets_router)

    @app.get("/")
    def read_root():
        return {"message": "Finance Tracker API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000)
