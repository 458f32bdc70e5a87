# storefront/main.py
from fastapi import FastAPI
from storefront.data.database import init_db
from storefront.api.routers import users, carts, orders, health
from storefront.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)


def create_app() -> FastAPI:
    logger.info("Initializing database")
    init_db()

    app = FastAPI(
        title="Storefront Order Service",
        version="1.0.0",
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
