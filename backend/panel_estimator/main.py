"""
Panel Estimator API
FastAPI backend for electrical control panel BOM estimation and quotations,
async SQLAlchemy catalog store with an in-process price book fallback.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from panel_estimator import config
from panel_estimator.services.errors import InvalidPanelConfiguration, MandatoryLookupError
from panel_estimator.services.logging_config import setup_logging
from panel_estimator.services.middleware import RequestTimingMiddleware

setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_JSON)
logger = logging.getLogger("panel-estimator-api")

APP_VERSION = "1.0.0"

if not config.DATABASE_URL:
    logger.warning("MISSING env var: DATABASE_URL, running in dev mode")
logger.info(f"Catalog source: {config.CATALOG_SOURCE}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    from panel_estimator.db import init_db
    await init_db()
    yield
    from panel_estimator.db import engine
    await engine.dispose()


app = FastAPI(
    title="Panel Estimator API",
    version=APP_VERSION,
    description="BOM and cost estimation for MCC, PCC, LT, VFD, APFC and PLC panels",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

@app.exception_handler(InvalidPanelConfiguration)
async def invalid_configuration_handler(request: Request, exc: InvalidPanelConfiguration):
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"detail": str(exc), "errors": exc.errors}),
    )


@app.exception_handler(MandatoryLookupError)
async def mandatory_lookup_handler(request: Request, exc: MandatoryLookupError):
    logger.error(str(exc), extra={"component_code": exc.component_code})
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "componentCode": exc.component_code},
    )


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With", "X-Request-ID"],
)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)


# Routers
from panel_estimator.api.catalog_routes import router as catalog_router  # noqa: E402
from panel_estimator.api.estimation_routes import router as estimation_router  # noqa: E402
from panel_estimator.api.quotation_routes import router as quotation_router  # noqa: E402

app.include_router(catalog_router)
app.include_router(estimation_router)
app.include_router(quotation_router)


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": APP_VERSION,
        "catalog_source": config.CATALOG_SOURCE,
        "db_configured": bool(config.DATABASE_URL),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("panel_estimator.main:app", host="0.0.0.0", port=8000, reload=True)
