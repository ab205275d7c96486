import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog_admin.core.config import settings
from catalog_admin.database.connection import Base, SessionLocal, engine
from catalog_admin.middleware.metrics import MetricsMiddleware, empty_metrics
from catalog_admin.routes import system
from catalog_admin.routes.products import router as product_router
from catalog_admin.routes.pricing.calculate_discount import router as calculate_discount_router
from catalog_admin.services.product_service import seed_products

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("catalog-admin")

Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger.info("Starting %s...", settings.APP_NAME)
    app.state.start_time = datetime.utcnow()
    app.state.metrics = empty_metrics()

    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_products(db, settings.SEED_DATA_PATH)
        finally:
            db.close()

    yield

    logger.info("Shutting down %s...", settings.APP_NAME)


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(MetricsMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with a readable message, not FastAPI's default 422."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    detail = "Bad Request: " + "; ".join(messages)
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


app.include_router(product_router)
app.include_router(calculate_discount_router)
app.include_router(system.router)
