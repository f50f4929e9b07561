# educk/api/__init__.py
from fastapi import FastAPI

from educk.api.routers import carts, categories, courses, health, orders, reviews, users


def create_app() -> FastAPI:
    app = FastAPI(
        title="Educk Marketplace API",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(categories.router)
    app.include_router(courses.router)
    app.include_router(reviews.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
