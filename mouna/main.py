from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from mouna.audit.router import router as audit_router
from mouna.backup.router import router as backup_router
from mouna.config import Settings, settings
from mouna.dashboard.router import router as dashboard_router
from mouna.database import build_engine, build_session_factory, init_db
from mouna.integrations.onesignal import OneSignalClient
from mouna.integrations.openfoodfacts import ProductCatalog
from mouna.logger import configure_logging
from mouna.notifications.router import router as notifications_router
from mouna.stock.category.router import router as category_router
from mouna.stock.products.router import router as product_router
from mouna.timeutils import set_shop_timezone
from mouna.users.routers import router as user_router


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings)
    set_shop_timezone(app_settings.TIMEZONE)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup")
        engine = build_engine(app_settings.DATABASE_URL)
        init_db(engine)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        app.state.product_catalog = ProductCatalog.from_settings(app_settings)
        app.state.notifier = OneSignalClient.from_settings(app_settings)
        yield
        app.state.product_catalog.close()
        app.state.notifier.close()
        engine.dispose()
        logger.info("Application shutdown")

    app = FastAPI(
        title="MOUNA",
        description="An API for tracking shop inventory, expiry dates and stock alerts.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"API Error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "details": str(exc)},
        )

    # Routers
    app.include_router(user_router, prefix="/api", tags=["Users"])
    app.include_router(product_router, prefix="/api", tags=["Stock - Products"])
    app.include_router(category_router, prefix="/api", tags=["Stock - Category"])
    app.include_router(dashboard_router, prefix="/api", tags=["Dashboard"])
    app.include_router(audit_router, prefix="/api", tags=["Audit"])
    app.include_router(backup_router, prefix="/api", tags=["Backup"])
    app.include_router(notifications_router, prefix="/api", tags=["Notifications"])

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Running on {settings.SERVER_HOST}:{settings.SERVER_PORT}")
    uvicorn.run("mouna.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT)
